"""
Embedded YAML configuration template for swanui.

The template is embedded in the code so it always stays in sync with the
schema. When users run 'swanui init', it is written to 'swanui.config.yaml'
in the current directory for them to customize. All fields align with the
Pydantic schema defined in schema.py.
"""

from .schema import SCHEMA_VERSION

DEFAULT_CONFIG_TEMPLATE = """\
# swanui configuration
# Generated from embedded template (schema version {version})
#
# Every section is optional; omitted values fall back to the defaults shown.
# Environment variables: Use ${{VAR}} syntax (e.g., ${{SWANUI_VICI_SOCKET}})

version: {version}

###############################################################################
# HTTP backend
###############################################################################
server:
  host: "0.0.0.0"          # Listen address
  port: 8080
  static_dir: "./static"   # Frontend files served at '/' (skipped if missing)

###############################################################################
# swanctl invocation
###############################################################################
swanctl:
  binary: "swanctl"        # Name on PATH or absolute path
  timeout_seconds: 10      # A hung swanctl fails the request after this long

###############################################################################
# charon control channel (initiate / terminate)
###############################################################################
vici:
  socket_path: "/var/run/charon.vici"
  timeout_seconds: 10

logging:
  level: "INFO"            # DEBUG, INFO, WARNING, ERROR

###############################################################################
# Next Steps:
# 1. Validate config:
#      swanui validate-config swanui.config.yaml
# 2. Start the backend:
#      swanui --config-file swanui.config.yaml serve
###############################################################################
""".format(version=SCHEMA_VERSION)


def create_minimal_config(template: str) -> str:
    """Strip comments and blank lines from a template, keeping quoted '#'."""
    minimal_lines = []

    for line in template.splitlines():
        if not line.strip() or line.strip().startswith("#"):
            continue

        # Remove inline comments but keep the content
        if "#" in line:
            in_quotes = False
            quote_char = None
            for i, char in enumerate(line):
                if char in ('"', "'") and (i == 0 or line[i-1] != "\\"):
                    if not in_quotes:
                        in_quotes = True
                        quote_char = char
                    elif char == quote_char:
                        in_quotes = False
                elif char == "#" and not in_quotes:
                    line = line[:i].rstrip()
                    break

        if not line.strip():
            continue

        minimal_lines.append(line)

    return "\n".join(minimal_lines) + "\n"

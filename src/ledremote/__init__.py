"""LED Remote - control an ESP32 LED strip over local HTTP."""

import logging

__version__ = "0.1.0"

# Library modules log through "ledremote.*"; the CLI decides where it goes
logging.getLogger(__name__).addHandler(logging.NullHandler())

"""Allow ``python -m LicenseTool``."""
import sys

from LicenseTool.cli import main

if __name__ == "__main__":
    sys.exit(main())

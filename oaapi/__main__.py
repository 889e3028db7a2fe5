"""Package entry point for ``python -m oaapi``.

RULES:
- This file must exist for ``python -m oaapi`` to work
- Delegates everything to the CLI's main() function
"""

from oaapi.cli import main

if __name__ == "__main__":
    main()

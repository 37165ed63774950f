import sys

from filecourier.main import main

if __name__ == "__main__":  # pragma: no cover - CLI bridge
    sys.exit(main())

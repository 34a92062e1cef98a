"""Allow ``python -m notifyhub``."""
from .cli import main

if __name__ == "__main__":
    main()

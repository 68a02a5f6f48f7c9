"""Allow ``python -m rwa_lens``."""
from .cli import main

if __name__ == "__main__":
    main()

"""Allow ``python -m leaffall``."""

from leaffall.main import main

if __name__ == "__main__":
    main()

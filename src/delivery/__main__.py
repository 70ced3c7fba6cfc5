"""Entry point for running the delivery worker as a module.

Allows running with: python -m src.delivery
"""

from src.delivery.worker import main

if __name__ == "__main__":
    main()

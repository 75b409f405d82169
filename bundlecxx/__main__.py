"""Entry point for running bundlecxx as a module."""

from bundlecxx.cli_entry import main

if __name__ == "__main__":
    main()

"""Allow `python -m borecli` to behave like the `bore` command."""

from borecli.launcher import main

if __name__ == "__main__":
    raise SystemExit(main())

"""Module entry point for `python -m lnp.cli`."""

if __name__ == "__main__":  # pragma: no cover (invocation driven)
    from lnp.cli import cli

    cli()

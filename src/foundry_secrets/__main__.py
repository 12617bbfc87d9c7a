from foundry_secrets.cli.main import cli

if __name__ == "__main__":
    cli()

import click

from crumb.signing import BadSignature, CookieSigner


@click.group(help="Signed cookie tools.")
@click.option("--key", envvar="APP_KEY", required=True, help="Signing key. Defaults to APP_KEY variable.")
@click.pass_context
def cli(context: click.Context, key: str) -> None:
    context.obj = CookieSigner(key)


@cli.command("sign")
@click.argument("name")
@click.argument("value")
@click.pass_obj
def sign_command(signer: CookieSigner, name: str, value: str) -> None:
    """Sign cookie value."""
    click.echo(signer.sign(name, value))


@cli.command("verify")
@click.argument("name")
@click.argument("signed_value")
@click.pass_obj
def verify_command(signer: CookieSigner, name: str, signed_value: str) -> None:
    """Verify signature and print the original cookie value."""
    try:
        click.echo(signer.unsign(name, signed_value))
    except BadSignature as exc:
        raise click.ClickException(str(exc))

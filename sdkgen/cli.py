import logging
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from sdkgen.codegen.codegen import Codegen, build_ir, derive_ir
from sdkgen.codegen.projection import TypeProjector, get_vocabulary
from sdkgen.codegen.schema import SchemaLoader
from sdkgen.config import ClientConfig, get_config
from sdkgen.exceptions import SdkGenError

console = Console()
app = typer.Typer(
    name='sdkgen',
    help='Compile OpenAPI documents into client IR for several targets',
    no_args_is_help=True,
)


def _configure_logging(verbose: bool) -> None:
    if not verbose:
        return
    logging.basicConfig(
        level=logging.DEBUG,
        format='%(message)s',
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _fail(error: Exception) -> None:
    console.print(f'[red]Error:[/red] {escape(str(error))}')
    raise typer.Exit(1)


@app.command()
def generate(
    config: Annotated[
        str | None,
        typer.Option('--config', '-c', help='Path to configuration file (YAML)'),
    ] = None,
    client: Annotated[
        str | None,
        typer.Option('--client', help='Only generate the client with this name'),
    ] = None,
    verbose: Annotated[
        bool, typer.Option('--verbose', '-v', help='Show debug logging')
    ] = False,
) -> None:
    """Generate clients from configuration.

    If no config file is specified, will look for sdkgen.yaml or sdkgen.yml
    in the current directory, then for [tool.sdkgen] in pyproject.toml.

    Examples:
        sdkgen generate
        sdkgen generate --config sdkgen.yaml --client web
    """
    _configure_logging(verbose)

    try:
        generator_config = get_config(config)
        codegen = Codegen(generator_config)

        with Progress(
            SpinnerColumn(),
            TextColumn('[progress.description]{task.description}'),
            console=console,
        ) as progress:
            task = progress.add_task(
                f'Generating clients from {generator_config.spec}...', total=None
            )
            results = codegen.generate(client)
            progress.update(task, description='Code generation completed!')

    except SdkGenError as e:
        _fail(e)

    for name, files in results.items():
        console.print(f'[green]Generated client {name}[/green]')
        for path in files:
            console.print(f'  - {escape(str(path))}')


@app.command()
def inspect(
    spec: Annotated[str, typer.Argument(help='Path or URL to the OpenAPI document')],
    include_tag: Annotated[
        list[str] | None,
        typer.Option('--include-tag', help='Keep operations with a matching tag'),
    ] = None,
    exclude_tag: Annotated[
        list[str] | None,
        typer.Option('--exclude-tag', help='Drop operations with a matching tag'),
    ] = None,
    target: Annotated[
        str, typer.Option('--target', '-t', help='Target vocabulary for model types')
    ] = 'typescript',
    verbose: Annotated[
        bool, typer.Option('--verbose', '-v', help='Show debug logging')
    ] = False,
) -> None:
    """Print the services and models a client would get.

    Examples:
        sdkgen inspect ./api.yaml
        sdkgen inspect ./api.yaml --include-tag '^pets$' --target python
    """
    _configure_logging(verbose)

    try:
        vocabulary = get_vocabulary(target)
        client = ClientConfig(
            type=target,
            out_dir='.',
            package_name='inspect',
            name='inspect',
            include_tags=include_tag or [],
            exclude_tags=exclude_tag or [],
        )
        document = SchemaLoader().load(spec)
        derived = derive_ir(build_ir(document), client)
    except SdkGenError as e:
        _fail(e)

    services = Table(title='Services')
    services.add_column('Tag')
    services.add_column('Operations', justify='right')
    for service in derived.services:
        services.add_row(service.tag, str(len(service.operations)))
    console.print(services)

    projector = TypeProjector(vocabulary, known_models=derived.model_names())
    models = Table(title=f'Models ({vocabulary.name})')
    models.add_column('Name')
    models.add_column('Type')
    for model in derived.model_defs:
        models.add_row(model.name, escape(projector.render(model.schema_)))
    console.print(models)


@app.command()
def validate(
    spec: Annotated[str, typer.Argument(help='Path or URL to the OpenAPI document')],
) -> None:
    """Check that a document loads and compiles."""
    try:
        document = SchemaLoader().load(spec)
        ir = build_ir(document)
    except SdkGenError as e:
        _fail(e)

    operations = sum(1 for _ in ir.iter_operations())
    console.print(
        f'[green]Valid:[/green] {document.info.title} {document.info.version} '
        f'({operations} operations, {len(ir.model_defs)} models)'
    )


@app.command()
def version() -> None:
    """Show the version of sdkgen."""
    from sdkgen import __version__

    console.print(f'sdkgen version: {__version__}')


if __name__ == '__main__':
    app()

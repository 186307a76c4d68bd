"""Command-line interface for panelmap."""

import json
from pathlib import Path
from typing import TYPE_CHECKING, Annotated

import typer
from rich.console import Console
from rich.table import Table

if TYPE_CHECKING:
    from panelmap.normalization.values import DataValueList

app = typer.Typer(
    name="panelmap",
    help="Normalize query results into geolocated map data values.",
    no_args_is_help=True,
)

console = Console()

ConfigOption = Annotated[
    Path,
    typer.Option(
        "--config",
        "-c",
        help="Path to panel configuration (YAML or JSON).",
        exists=True,
        dir_okay=False,
    ),
]


def _render_values(data: "DataValueList", limit: int) -> None:
    table = Table(title=f"Data values ({len(data)})")
    table.add_column("Key", style="cyan")
    table.add_column("Location")
    table.add_column("Latitude", justify="right")
    table.add_column("Longitude", justify="right")
    table.add_column("Value", justify="right", style="green")
    table.add_column("Rounded", justify="right")

    for value in data[:limit]:
        table.add_row(
            str(value.key),
            str(value.location_name),
            str(value.location_latitude),
            str(value.location_longitude),
            str(value.value),
            str(value.value_rounded),
        )
    console.print(table)

    if len(data) > limit:
        console.print(f"[dim]... {len(data) - limit} more[/dim]")

    summary = Table(title="Summary")
    summary.add_column("Metric", style="cyan")
    summary.add_column("Value", style="green")
    summary.add_row("Highest value", str(data.highest_value))
    summary.add_row("Lowest value", str(data.lowest_value))
    summary.add_row("Value range", str(data.value_range))
    if data.columns is not None:
        summary.add_row("Columns", ", ".join(data.columns))
    console.print(summary)

    if data.aggregations:
        legend = Table(title="Legend")
        legend.add_column("Bucket", style="cyan")
        legend.add_column("Count", justify="right", style="green")
        for bucket in data.aggregation_sorted_list or []:
            legend.add_row(bucket, str(data.aggregations[bucket]))
        console.print(legend)


@app.command()
def normalize(
    config: ConfigOption,
    input_path: Annotated[
        Path,
        typer.Option(
            "--input",
            "-i",
            help="Query result JSON file.",
            exists=True,
            dir_okay=False,
        ),
    ],
    locations: Annotated[
        Path | None,
        typer.Option(
            "--locations",
            "-l",
            help="Location list JSON. Overrides locations_path from the config.",
        ),
    ] = None,
    output: Annotated[
        Path | None,
        typer.Option(
            "--output",
            "-o",
            help="Write values to .csv (validated frame) or .json (renderer payload).",
        ),
    ] = None,
    limit: Annotated[
        int,
        typer.Option("--limit", help="Maximum rows to print."),
    ] = 50,
    log_level: Annotated[
        str,
        typer.Option("--log-level", help="Log level."),
    ] = "WARNING",
    json_logs: Annotated[
        bool,
        typer.Option("--json-logs", help="Emit logs as JSON lines."),
    ] = False,
) -> None:
    """Normalize a query result file into map data values."""
    from pandera.errors import SchemaError

    from panelmap.config.loader import load_config
    from panelmap.ingestion import load_locations, load_results
    from panelmap.normalization.formatter import ResultNormalizer
    from panelmap.utils.logging import configure_logging, log_context

    configure_logging(level=log_level, json_output=json_logs)

    if output is not None and output.suffix.lower() not in {".csv", ".json"}:
        console.print(
            f"[red]Error: Unsupported output format '{output.suffix}'. "
            "Use .csv or .json.[/red]"
        )
        raise typer.Exit(code=1)

    try:
        panel_config = load_config(config)
        source = panel_config.location_data

        with log_context(location_data=source.value, input=str(input_path)):
            locations_path = locations or panel_config.locations_path
            location_list = (
                load_locations(locations_path)
                if locations_path is not None and source.uses_time_series
                else []
            )
            results = load_results(input_path, source)

            normalizer = ResultNormalizer(panel_config, locations=location_list)
            data = normalizer.normalize(results)

            if output is not None:
                output.parent.mkdir(parents=True, exist_ok=True)
                if output.suffix.lower() == ".csv":
                    data.to_frame().to_csv(output, index=False)
                else:
                    output.write_text(
                        json.dumps(data.to_payload(), indent=2, default=str),
                        encoding="utf-8",
                    )

    except FileNotFoundError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1) from e
    except ValueError as e:
        console.print(f"[red]Invalid input: {e}[/red]")
        raise typer.Exit(code=1) from e
    except SchemaError as e:
        console.print(f"[red]Output validation failed: {e}[/red]")
        raise typer.Exit(code=1) from e

    console.print(f"[blue]Location data: {source.value}[/blue]")
    _render_values(data, limit)

    if output is not None:
        console.print(f"\n[green]Saved to: {output}[/green]")


@app.command("show-config")
def show_config(config: ConfigOption) -> None:
    """Print the resolved panel configuration."""
    from panelmap.config.loader import load_config

    try:
        panel_config = load_config(config)
    except ValueError as e:
        console.print(f"[red]Invalid config: {e}[/red]")
        raise typer.Exit(code=1) from e

    table = Table(title=f"Panel configuration ({config.name})")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    settings = panel_config.model_dump(mode="json")
    options = settings.pop("table_query_options")
    for name, value in settings.items():
        table.add_row(name, "" if value is None else str(value))
    for name, value in options.items():
        table.add_row(
            f"table_query_options.{name}", "" if value is None else str(value)
        )

    console.print(table)


if __name__ == "__main__":
    app()

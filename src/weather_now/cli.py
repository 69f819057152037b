"""Typer CLI: weather-now search, here, last, forget."""

from __future__ import annotations

import asyncio
import logging

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel

from weather_now.screen.state import DisplayState

app = typer.Typer(
    name="weather-now",
    help="Current weather for a place name or your current location",
    no_args_is_help=True,
)
console = Console()


@app.callback()
def main(
    verbose: bool = typer.Option(
        False, "--verbose", "-v",
        help="Log debug output",
    ),
) -> None:
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=console, show_path=False)],
        )


def render(state: DisplayState) -> None:
    """Print the display text, plus the icon once one is cached."""
    if state.reading is not None:
        console.print(Panel(state.text, title=state.reading.city_name, expand=False))
    else:
        console.print(state.text)
    if state.icon_path is not None:
        console.print(f"[dim]Icon: {state.icon_path}[/dim]")


@app.command()
def search(
    place: str = typer.Argument(help="City name, address or zip code"),
) -> None:
    """Show the current weather for a place name."""

    async def _run() -> None:
        from weather_now.screen.controller import WeatherScreen

        async with WeatherScreen() as screen:
            await screen.on_submit_place_name(place)
            await screen.wait_idle()
            render(screen.state)

    asyncio.run(_run())


@app.command()
def here(
    updates: int = typer.Option(
        1, "--updates", "-u", min=1,
        help="Number of location updates to show before exiting",
    ),
) -> None:
    """Show the current weather for this device's location."""

    async def _run() -> None:
        from weather_now.location.provider import IpLocationProvider
        from weather_now.screen.controller import WeatherScreen

        async def prompt() -> bool:
            return await asyncio.to_thread(
                typer.confirm, "Allow weather-now to use your location?", default=False,
            )

        done = asyncio.Event()
        revision = 0
        readings = 0

        def on_change(state: DisplayState) -> None:
            nonlocal revision, readings
            if done.is_set() or state.revision == revision:
                return
            revision = state.revision
            render(state)
            if state.reading is None:
                # permission or fetch message
                done.set()
                return
            readings += 1
            if readings >= updates:
                done.set()

        async with WeatherScreen(location_provider=IpLocationProvider(prompt=prompt)) as screen:
            screen.state.add_listener(on_change)
            screen.on_request_my_location()
            await done.wait()
            screen.stop_location_updates()
            await screen.wait_idle()
            if screen.state.icon_path is not None:
                console.print(f"[dim]Icon: {screen.state.icon_path}[/dim]")

    asyncio.run(_run())


@app.command()
def last() -> None:
    """Show the weather for the last successfully fetched location."""

    async def _run() -> None:
        from weather_now.screen.controller import WeatherScreen

        async with WeatherScreen() as screen:
            coords = await screen.on_start()
            if coords is None:
                console.print("[yellow]No saved location yet.[/yellow]")
                return
            await screen.wait_idle()
            render(screen.state)

    asyncio.run(_run())


@app.command()
def forget() -> None:
    """Clear the saved location."""

    async def _run() -> None:
        from weather_now.storage.coordinates import CoordinateStore

        await CoordinateStore().clear()
        console.print("Saved location cleared.")

    asyncio.run(_run())


if __name__ == "__main__":
    app()

from __future__ import annotations

import os
from typing import Optional

import requests
import typer
from rich import print as rprint
from rich.table import Table

from voicewire.audio.errors import WavError
from voicewire.audio.pipeline import decode as decode_wav
from voicewire.audio.resample import TARGET_SR
from voicewire.audio.wav import parse_container
from voicewire.client.svd_client import ServiceError, SVDClientFactory, TokenInvalidError
from voicewire.storage.output import (
    FORMATS,
    atomic_write_bytes,
    default_output,
    read_packets,
    write_packets,
    write_samples,
)
from voicewire.utils.config import load_config, section
from voicewire.utils.logging import setup_logging

app = typer.Typer(add_completion=False)
logger = setup_logging(os.environ.get("VOICEWIRE_LOG_LEVEL", "INFO"))

# exit codes
EXIT_IO = 1
EXIT_WAV = 2
EXIT_AUTH = 3
EXIT_SERVICE = 4
EXIT_USAGE = 5


def _read_input(path: str) -> bytes:
    try:
        with open(path, "rb") as f:
            return f.read()
    except OSError as e:
        rprint(f"[red]Cannot read {path}:[/red] {e}")
        raise typer.Exit(code=EXIT_IO)


def _convert(path: str):
    data = _read_input(path)
    try:
        samples = decode_wav(data)
    except WavError as e:
        logger.debug("decode failed for %s", path, exc_info=True)
        rprint(f"[red]{type(e).__name__}:[/red] {e}")
        raise typer.Exit(code=EXIT_WAV)
    logger.info("%s: %d bytes -> %d samples @ %d Hz", os.path.basename(path), len(data), samples.size, TARGET_SR)
    return samples


def _factory(cfg: dict, user: Optional[str], key: Optional[str], endpoint: Optional[str]) -> SVDClientFactory:
    f = SVDClientFactory.from_config(cfg)
    f.user = user or f.user
    f.key = key or f.key
    f.endpoint = endpoint or f.endpoint
    if not f.user or not f.key:
        rprint("[red]Missing credentials.[/red] Set service.user/service.key in the config, "
               "VOICEWIRE_SERVICE_USER/VOICEWIRE_SERVICE_KEY, or pass --user/--key.")
        raise typer.Exit(code=EXIT_USAGE)
    return f


def _call_service(fn, *args):
    try:
        return fn(*args)
    except TokenInvalidError as e:
        rprint(f"[red]Token invalid:[/red] {e}. Re-authenticate and try again.")
        raise typer.Exit(code=EXIT_AUTH)
    except ServiceError as e:
        rprint(f"[red]Service error:[/red] {e}")
        raise typer.Exit(code=EXIT_SERVICE)
    except requests.RequestException as e:
        rprint(f"[red]Request failed:[/red] {e}")
        raise typer.Exit(code=EXIT_SERVICE)


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging (chunk walk, resample, HTTP)")):
    """WAV to 24 kHz mono float32, and the voice encode/decode service."""
    if verbose:
        setup_logging(verbose=True)


@app.command("inspect")
def inspect_wav(path: str = typer.Argument(..., help="WAV file")):
    """Print the format and data chunk of a WAV file."""
    data = _read_input(path)
    try:
        fmt, span = parse_container(data)
    except WavError as e:
        rprint(f"[red]{type(e).__name__}:[/red] {e}")
        raise typer.Exit(code=EXIT_WAV)

    frames = span.length // fmt.block_align if fmt.block_align else 0
    table = Table(title=os.path.basename(path))
    table.add_column("Field")
    table.add_column("Value")
    table.add_row("Codec", fmt.codec.name)
    table.add_row("Channels", str(fmt.channels))
    table.add_row("Sample rate", f"{fmt.sample_rate} Hz")
    table.add_row("Bits per sample", str(fmt.bits_per_sample))
    table.add_row("Data offset", str(span.offset))
    table.add_row("Data bytes", str(span.length))
    table.add_row("Frames", str(frames))
    table.add_row("Duration", f"{frames / fmt.sample_rate:.3f} s")
    table.add_row("Needs resample", "no" if fmt.sample_rate == TARGET_SR else "yes")
    rprint(table)


@app.command()
def convert(
    path: str = typer.Argument(..., help="WAV file"),
    out: Optional[str] = typer.Option(None, help="Output file (default: next to input)"),
    fmt: Optional[str] = typer.Option(None, "--format", help="npy|f32|json"),
):
    """Convert a WAV file to 24 kHz mono float32 samples."""
    cfg = section(load_config(), "output")
    fmt = (fmt or cfg.get("format") or "npy").lower()
    if fmt not in FORMATS:
        rprint(f"[red]Unknown format {fmt!r}.[/red] Use one of: {', '.join(FORMATS)}")
        raise typer.Exit(code=EXIT_USAGE)

    samples = _convert(path)
    out = out or default_output(path, f".24k.{fmt}", cfg.get("dir", ""))
    write_samples(out, samples, fmt)
    rprint(f"[green]Wrote {samples.size} samples ({samples.size / TARGET_SR:.2f}s):[/green] {out}")


@app.command()
def encode(
    path: str = typer.Argument(..., help="WAV file"),
    steam_id: int = typer.Option(..., help="SteamID64 the voice data is attributed to"),
    out: Optional[str] = typer.Option(None, help="Output JSON (default: next to input)"),
    user: Optional[str] = typer.Option(None, help="Service user (overrides config)"),
    key: Optional[str] = typer.Option(None, help="Service key (overrides config)"),
    endpoint: Optional[str] = typer.Option(None, help="Service endpoint (overrides config)"),
):
    """Convert a WAV file and send it to the voice encoder."""
    cfg = load_config()
    samples = _convert(path)
    client = _call_service(_factory(cfg, user, key, endpoint).create_client)
    packets = _call_service(client.encode, steam_id, samples)
    out = out or default_output(path, ".voice.json", section(cfg, "output").get("dir", ""))
    write_packets(out, packets)
    rprint(f"[green]Encoded {len(packets)} packets:[/green] {out}")


@app.command()
def decode(
    packets_json: str = typer.Argument(..., help="JSON list of base64 voice packets"),
    out: Optional[str] = typer.Option(None, help="Output WAV (default: next to input)"),
    user: Optional[str] = typer.Option(None, help="Service user (overrides config)"),
    key: Optional[str] = typer.Option(None, help="Service key (overrides config)"),
    endpoint: Optional[str] = typer.Option(None, help="Service endpoint (overrides config)"),
):
    """Send voice packets to the decoder and save the returned WAV."""
    cfg = load_config()
    try:
        packets = read_packets(packets_json)
    except (OSError, ValueError) as e:
        rprint(f"[red]Cannot load packets:[/red] {e}")
        raise typer.Exit(code=EXIT_IO)
    client = _call_service(_factory(cfg, user, key, endpoint).create_client)
    audio = _call_service(client.decode, packets)
    out = out or default_output(packets_json, ".wav", section(cfg, "output").get("dir", ""))
    atomic_write_bytes(out, audio)
    rprint(f"[green]Decoded audio written:[/green] {out}")


@app.command()
def token(
    user: Optional[str] = typer.Option(None, help="Service user (overrides config)"),
    key: Optional[str] = typer.Option(None, help="Service key (overrides config)"),
    endpoint: Optional[str] = typer.Option(None, help="Service endpoint (overrides config)"),
):
    """Check credentials by fetching a token."""
    client = _call_service(_factory(load_config(), user, key, endpoint).create_client)
    rprint(f"[green]Token OK[/green] for {client.user} @ {client.endpoint}")
    rprint(client.token)


if __name__ == "__main__":
    app()

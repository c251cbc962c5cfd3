from pathlib import Path
from typing import Optional

import numpy as np
import rich
import typer
from rich.progress import track
from rich.table import Table

from .config import MainCfg, QuantCfg, TrainingCfg
from .data.blocks import codebook_mosaic, from_blocks, load_gray, save_gray, to_blocks
from .quant.report import image_report
from .quant.vq import VQQuant
from .utils.logging import init_logger

app = typer.Typer(help="LBG block vector quantizer CLI")


@app.callback()
def main(ctx: typer.Context,
         log_level: str = typer.Option("INFO", help="loguru level")):
    ctx.obj = {"log_level": log_level}


@app.command()
def run(
    ctx: typer.Context,
    image: Path = typer.Argument(..., exists=True, dir_okay=False),
    out: Path = Path("reconstructed_image.png"),
    mosaic: Optional[Path] = None,
    block: int = 2,
    codes: int = 16,
    init: str = "split",
    policy: str = typer.Option("converge", help="converge | fixed | fixed-rounds"),
    rounds: int = 10,
    workers: int = 1,
    perturbation: float = 1.0,
    seed: int = 42,
):
    try:
        cfg = MainCfg(
            image=image, out=out, mosaic=mosaic, block=block,
            log_level=ctx.obj["log_level"],
            quant=QuantCfg(codes=codes, init=init, perturbation=perturbation,
                           low=0, high=255, seed=seed),
            training=TrainingCfg(policy=policy, rounds=rounds, workers=workers),
        )
    except ValueError as e:
        raise typer.BadParameter(str(e))
    init_logger(cfg.log_level)

    # 1) tiles
    img  = load_gray(cfg.image)
    vecs = to_blocks(img, cfg.block).astype(np.float64)
    rich.print(f"[bold]{cfg.image}[/] {img.shape[1]}x{img.shape[0]} -> {len(vecs):,} blocks")

    # 2) codebook
    vq = VQQuant(cfg.quant, cfg.training).fit(vecs)

    # 3) reconstruction
    idx = vq.encode(vecs)
    rec = np.empty_like(vecs)
    for i in track(range(len(idx)), description="Reconstructing", transient=True):
        rec[i] = vq.codebook[idx[i]]
    rec_img = from_blocks(rec, img.shape, cfg.block)
    save_gray(rec_img, cfg.out)
    if cfg.mosaic is not None:
        save_gray(codebook_mosaic(vq.codebook, cfg.block), cfg.mosaic)

    # 4) report
    rep = image_report(img, rec_img, len(vq.codebook), cfg.block, cfg.bits)
    tab = Table(title="Vector quantization")
    tab.add_column("metric")
    tab.add_column("value", justify="right")
    tab.add_row("codebook", f"{rep.codebook_size} x {rep.dim}")
    tab.add_row("rounds", f"{vq.result.rounds} (converged={vq.result.converged})")
    tab.add_row("MSE", f"{rep.mse:.4f}")
    tab.add_row("PSNR", f"{rep.psnr:.2f} dB")
    tab.add_row("bits/index", str(rep.bits_per_index))
    tab.add_row("compression", f"{rep.ratio:.2f}")
    rich.print(tab)
    rich.print(f"[bold green]saved[/] {cfg.out}")


if __name__ == "__main__":
    app()

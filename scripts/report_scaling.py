#!/usr/bin/env python3
"""Run the signature benchmark over growing moduli and emit a table + figures.

每个密钥规模单独起一个子进程运行 benchmark_signature.py（stdin 喂入参数），
解析其末尾的 JSON，汇总为：
- artifacts/signature_scaling.xlsx
- artifacts/fig_sign_verify.png / artifacts/fig_modpow.png
"""

from __future__ import annotations

import json
import os
import subprocess
import sys
from pathlib import Path
from typing import Dict, List, Tuple

from openpyxl import Workbook
from openpyxl.utils import get_column_letter

ROOT = Path(__file__).resolve().parents[1]
ART = ROOT / "artifacts"
ART.mkdir(parents=True, exist_ok=True)

# Avoid matplotlib writing cache under a non-writable home directory.
os.environ.setdefault("MPLCONFIGDIR", str(ART / ".mplconfig"))

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt

# (p, q) Mersenne exponents, smallest modulus first
KEY_PAIRS: List[Tuple[int, int]] = [(61, 89), (89, 107), (107, 127), (127, 521), (521, 607), (607, 1279), (1279, 2203), (2203, 2281)]
HASHES = ["sha256", "md5-fallback"]
REPEATS = 10
MESSAGE_BYTES = 4096


def _parse_last_json(stdout: str) -> Dict:
    # Benchmark prints a JSON object at the end. Extract the last complete {...} block.
    marker = "--- JSON"
    start = stdout.rfind(marker)
    if start != -1:
        stdout = stdout[start:]
    first = stdout.find("{")
    last = stdout.rfind("}")
    if first == -1 or last == -1 or last <= first:
        raise ValueError("No JSON block found in benchmark output")
    return json.loads(stdout[first : last + 1])


def _run_benchmark(python: str, a: int, b: int, algorithm: str) -> Dict:
    cmd = [python, str(ROOT / "scripts" / "benchmark_signature.py")]
    inp = f"{a}\n{b}\n{REPEATS}\n{algorithm}\n{MESSAGE_BYTES}\n"
    proc = subprocess.run(cmd, input=inp.encode(), stdout=subprocess.PIPE, stderr=subprocess.STDOUT, cwd=str(ROOT))
    out = proc.stdout.decode(errors="replace")
    if proc.returncode != 0:
        raise RuntimeError(f"benchmark run failed:\n{out}")
    return _parse_last_json(out)


def _write_table(ws, headers: List[str], rows: List[List], start_row: int = 1, start_col: int = 1) -> None:
    for j, h in enumerate(headers, start=start_col):
        ws.cell(row=start_row, column=j, value=h)
    for i, row in enumerate(rows, start=start_row + 1):
        for j, val in enumerate(row, start=start_col):
            ws.cell(row=i, column=j, value=val)
    for j in range(start_col, start_col + len(headers)):
        ws.column_dimensions[get_column_letter(j)].width = 18


def _row(result: Dict) -> List:
    t = result["timings_sec"]
    return [
        result["modulus_bits"],
        result["p_exponent"],
        result["q_exponent"],
        round(t["construct_validate"] * 1000.0, 3),
        round(t["mod_pow"]["mean"] * 1000.0, 3),
        round(t["sign_message"]["mean"] * 1000.0, 3),
        round(t["sign_message"]["std"] * 1000.0, 3),
        round(t["verify_message"]["mean"] * 1000.0, 3),
        round(t["verify_message"]["std"] * 1000.0, 3),
        "yes" if result["success"] else "NO",
    ]


HEADERS = [
    "Modulus_Bits",
    "P_Exp",
    "Q_Exp",
    "Construct_ms",
    "ModPow_ms",
    "Sign_ms",
    "Sign_std_ms",
    "Verify_ms",
    "Verify_std_ms",
    "Self_Check",
]


def main() -> None:
    python = sys.executable
    rows_by_hash: Dict[str, List[List]] = {}

    total = len(HASHES) * len(KEY_PAIRS)
    step = 0
    for algorithm in HASHES:
        rows = []
        for a, b in KEY_PAIRS:
            step += 1
            print(f"[{step}/{total}] {algorithm}: 2^{a}-1 × 2^{b}-1 …")
            rows.append(_row(_run_benchmark(python, a, b, algorithm)))
        rows_by_hash[algorithm] = rows

    wb = Workbook()
    ws = wb.active
    ws.title = HASHES[0]
    _write_table(ws, HEADERS, rows_by_hash[HASHES[0]])
    for algorithm in HASHES[1:]:
        _write_table(wb.create_sheet(algorithm), HEADERS, rows_by_hash[algorithm])
    xlsx_path = ART / "signature_scaling.xlsx"
    wb.save(xlsx_path)

    # sign / verify vs modulus size
    fig, axs = plt.subplots(1, 2, figsize=(12, 4), sharex=True)
    for algorithm, rows in rows_by_hash.items():
        bits = [r[0] for r in rows]
        axs[0].plot(bits, [r[5] for r in rows], marker="o", label=algorithm)
        axs[1].plot(bits, [r[7] for r in rows], marker="o", label=algorithm)
    axs[0].set_title("Sign (private exponent)")
    axs[0].set_ylabel("Time (ms)")
    axs[1].set_title("Verify (public exponent)")
    for ax in axs:
        ax.set_xlabel("Modulus (bits)")
        ax.grid(True, linestyle="--", linewidth=0.5)
        ax.legend()
    fig.tight_layout()
    fig1_path = ART / "fig_sign_verify.png"
    fig.savefig(fig1_path, dpi=200)
    plt.close(fig)

    rows = rows_by_hash[HASHES[0]]
    fig, ax = plt.subplots(figsize=(6, 4))
    ax.plot([r[0] for r in rows], [r[4] for r in rows], marker="o", color="tab:red")
    ax.set_title("mod_pow (private exponent)")
    ax.set_xlabel("Modulus (bits)")
    ax.set_ylabel("Time (ms)")
    ax.grid(True, linestyle="--", linewidth=0.5)
    fig.tight_layout()
    fig2_path = ART / "fig_modpow.png"
    fig.savefig(fig2_path, dpi=200)
    plt.close(fig)

    print(f"Saved: {xlsx_path}")
    print(f"Saved: {fig1_path}")
    print(f"Saved: {fig2_path}")


if __name__ == "__main__":
    main()

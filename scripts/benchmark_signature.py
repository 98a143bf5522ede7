#!/usr/bin/env python3
"""Single-key RSA signature benchmark with a correctness self-check.

流程：
- 用两个 Mersenne 素数 2^a-1, 2^b-1 构造密钥（不做密钥生成），带完整校验；
- 计时 mod_pow、sign_message、verify_message，重复 N 次取均值/标准差；
- 在临时目录里做一次文件级 sign/verify（含 sidecar 写入），并篡改一个字节自检；
- 最后打印 JSON 结果，供 report_scaling.py 汇总。
"""

from __future__ import annotations

import json
import secrets
import sys
import tempfile
import time
from pathlib import Path
from typing import Callable, Tuple

import numpy as np

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from plainrsa.crypto.hashing import ConfiguredHash, DefaultFallback, HashSelection
from plainrsa.crypto.numeric import gcd, mod_pow
from plainrsa.crypto.signature import RsaSignature

MERSENNE_EXPONENTS = [61, 89, 107, 127, 521, 607, 1279, 2203, 2281]


def _ms(sec: float) -> float:
    return sec * 1000.0


def _prompt_int(msg: str, default: int) -> int:
    s = input(msg).strip()
    return default if s == "" else int(s)


def _prompt_str(msg: str, default: str) -> str:
    s = input(msg).strip()
    return default if s == "" else s


def prompt_inputs() -> Tuple[int, int, int, str, int]:
    a = _prompt_int("请输入 p 的 Mersenne 指数（默认 521）：", 521)
    b = _prompt_int("请输入 q 的 Mersenne 指数（默认 607）：", 607)
    repeats = _prompt_int("请输入重复次数（默认 20）：", 20)
    algorithm = _prompt_str("请输入哈希算法（默认 sha256，输入 md5-fallback 使用无约简 MD5）：", "sha256")
    msg_len = _prompt_int("请输入消息长度 (byte)（默认 4096）：", 4096)
    return a, b, repeats, algorithm, msg_len


def _selection(algorithm: str) -> HashSelection:
    if algorithm == "md5-fallback":
        return DefaultFallback()
    return ConfiguredHash(algorithm)


def _private_exponent(phi: int, start: int = 65537) -> int:
    d = start
    while gcd(d, phi) != 1:
        d += 2
    return d


def _time_repeated(fn: Callable[[], object], repeats: int) -> np.ndarray:
    samples = []
    for _ in range(repeats):
        t0 = time.perf_counter()
        fn()
        samples.append(time.perf_counter() - t0)
    return np.array(samples, dtype=np.float64)


def _stats(samples: np.ndarray) -> dict:
    return {
        "mean": float(np.mean(samples)),
        "std": float(np.std(samples)),
        "min": float(np.min(samples)),
        "max": float(np.max(samples)),
    }


def main() -> None:
    a, b, repeats, algorithm, msg_len = prompt_inputs()
    if a not in MERSENNE_EXPONENTS or b not in MERSENNE_EXPONENTS:
        raise ValueError(f"指数必须取自 {MERSENNE_EXPONENTS}")
    if a == b:
        raise ValueError("p 与 q 不能相同")
    if repeats < 1:
        raise ValueError("重复次数至少为 1")
    if msg_len < 1:
        raise ValueError("消息长度至少为 1 byte")

    p = (1 << a) - 1
    q = (1 << b) - 1
    phi = (p - 1) * (q - 1)
    d = _private_exponent(phi)
    selection = _selection(algorithm)

    # ===== 构造（含素性与范围校验）=====
    t0 = time.perf_counter()
    signer = RsaSignature(p, q, d, selection, validate=True)
    t_construct = time.perf_counter() - t0
    n = signer.modulus
    print(f"【密钥】构造并校验：{_ms(t_construct):.2f} ms | n {n.bit_length()} bit, e {signer.key.e.bit_length()} bit")

    message = secrets.token_bytes(msg_len)

    # ===== mod_pow 热路径 =====
    base = secrets.randbelow(n)
    t_modpow = _time_repeated(lambda: mod_pow(base, d, n), repeats)
    print(f"【mod_pow】私钥指数：{_ms(float(np.mean(t_modpow))):.2f} ms ± {_ms(float(np.std(t_modpow))):.2f}")

    # ===== 内存签名/验签 =====
    signature, digest = signer.sign_message(message)
    t_sign = _time_repeated(lambda: signer.sign_message(message), repeats)
    t_verify = _time_repeated(lambda: signer.verify_message(message, signature), repeats)
    print(f"【签名】sign_message：{_ms(float(np.mean(t_sign))):.2f} ms | digest {digest.bit_length()} bit")
    print(f"【验签】verify_message：{_ms(float(np.mean(t_verify))):.2f} ms")

    # ===== 文件级自检 =====
    with tempfile.TemporaryDirectory() as tmp:
        doc = Path(tmp) / "message.bin"
        doc.write_bytes(message)
        t0 = time.perf_counter()
        signer.sign(doc)
        t_sign_file = time.perf_counter() - t0
        t0 = time.perf_counter()
        file_ok = signer.verify(doc)
        t_verify_file = time.perf_counter() - t0
        tampered = bytearray(message)
        tampered[0] ^= 0xFF
        doc.write_bytes(bytes(tampered))
        tamper_detected = not signer.verify(doc)
    print(f"【文件】sign {_ms(t_sign_file):.2f} ms | verify {_ms(t_verify_file):.2f} ms | 通过：{file_ok} | 篡改检出：{tamper_detected}")

    success = file_ok and tamper_detected and signer.verify_message(message, signature)

    result = {
        "p_exponent": a,
        "q_exponent": b,
        "modulus_bits": n.bit_length(),
        "private_exponent": d,
        "hash": algorithm,
        "message_bytes": msg_len,
        "repeats": repeats,
        "success": success,
        "timings_sec": {
            "construct_validate": t_construct,
            "mod_pow": _stats(t_modpow),
            "sign_message": _stats(t_sign),
            "verify_message": _stats(t_verify),
            "sign_file": t_sign_file,
            "verify_file": t_verify_file,
        },
    }

    print("\n--- JSON 结果（可用于后续汇总/作图）---")
    print(json.dumps(result, indent=2, ensure_ascii=False))


if __name__ == "__main__":
    main()

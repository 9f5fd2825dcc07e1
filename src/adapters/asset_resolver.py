"""Resolución de assets estáticos.

Contrato:
- Para cada `AssetRef` del contenido más los assets siempre requeridos
  (favicon), copia `source/<public_path>` a `target/<public_path>` o, con
  `copy=False`, verifica que ya esté en `target`.
- Si falta alguno: `MissingAssetError` con todos los nombres lógicos que faltan.
  Es un error fatal de build; no se reintenta.

Las operaciones son disjuntas, así que se ejecutan en paralelo.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Iterable

from core.domain.models import FAVICON, AssetRef
from core.errors import MissingAssetError
from core.interfaces.storage import Directory

logger = logging.getLogger(__name__)

ALWAYS_REQUIRED: tuple[AssetRef, ...] = (FAVICON,)


def collect_refs(refs: Iterable[AssetRef]) -> list[AssetRef]:
    """Añade los assets obligatorios y elimina duplicados por nombre lógico."""

    seen: dict[str, AssetRef] = {}
    for ref in (*refs, *ALWAYS_REQUIRED):
        seen.setdefault(ref.logical_name, ref)
    return list(seen.values())


async def resolve_assets(
    refs: Iterable[AssetRef],
    *,
    source: Directory | None,
    target: Directory,
    copy: bool = True,
    max_concurrency: int = 8,
) -> dict[str, str]:
    """Copia/verifica los assets y devuelve el manifest nombre lógico -> ruta pública."""

    wanted = collect_refs(refs)
    sem = asyncio.Semaphore(max(1, max_concurrency))
    target.ensure()

    async def resolve_one(ref: AssetRef) -> bool:
        async with sem:
            if copy and source is not None:
                if not await asyncio.to_thread(source.has_file, ref.relative_path):
                    logger.error("Asset %s not found in source (%s)", ref.logical_name, ref.public_path)
                    return False
                data = await asyncio.to_thread(source.read_bytes, ref.relative_path)
                await asyncio.to_thread(target.write_bytes, ref.relative_path, data)
                logger.debug("Copied %s -> %s (%d bytes)", ref.logical_name, ref.public_path, len(data))
                return True
            present = await asyncio.to_thread(target.has_file, ref.relative_path)
            if not present:
                logger.error("Asset %s missing from output (%s)", ref.logical_name, ref.public_path)
            return present

    outcomes = await asyncio.gather(*(resolve_one(ref) for ref in wanted))

    missing = [(ref.logical_name, ref.public_path) for ref, ok in zip(wanted, outcomes) if not ok]
    if missing:
        raise MissingAssetError(missing)

    logger.info("Resolved %d asset(s)", len(wanted))
    return {ref.logical_name: ref.public_path for ref in wanted}


def resolve_assets_sync(
    refs: Iterable[AssetRef],
    *,
    source: Directory | None,
    target: Directory,
    copy: bool = True,
    max_concurrency: int = 8,
) -> dict[str, str]:
    return asyncio.run(
        resolve_assets(refs, source=source, target=target, copy=copy, max_concurrency=max_concurrency)
    )

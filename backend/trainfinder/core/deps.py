from __future__ import annotations

from dataclasses import dataclass

from fastapi import Request

from trainfinder.core.config import Settings
from trainfinder.index.builder import IndexBuilder
from trainfinder.index.lookup import LookupEngine
from trainfinder.index.scheduler import RebuildScheduler
from trainfinder.index.store import IndexStore
from trainfinder.upstream.client import TransportClient


@dataclass
class Services:
    settings: Settings
    client: TransportClient
    store: IndexStore
    builder: IndexBuilder
    scheduler: RebuildScheduler
    lookup: LookupEngine


def build_services(cfg: Settings) -> Services:
    client = TransportClient(cfg)
    store = IndexStore()
    builder = IndexBuilder(cfg, client, store)
    return Services(
        settings=cfg,
        client=client,
        store=store,
        builder=builder,
        scheduler=RebuildScheduler(builder, cfg.rebuild_interval),
        lookup=LookupEngine(store),
    )


def get_services(request: Request) -> Services:
    return request.app.state.services

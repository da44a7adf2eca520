# app/routers/changes.py
"""
Live collection feed over WebSocket.
WS /ws/{collection} — one full snapshot, then every created/updated/deleted diff.
"""

import asyncio
import contextlib
from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from app.database import SessionLocal
from app.models.sale import Sale
from app.models.service_record import ServiceRecord
from app.models.spare_part import SparePart, PartTransaction
from app.models.vehicle import VehicleModel, VehicleUnit
from app.schemas.sale import SaleOut
from app.schemas.service_record import ServiceRecordOut
from app.schemas.spare_part import SparePartOut, TransactionOut
from app.schemas.vehicle import UnitOut, VehicleOut
from app.services.change_feed import COLLECTIONS, feed
from app.services.spare_part_service import annotate
from app.utils.logger import get_logger

router = APIRouter()
logger = get_logger(__name__)

SNAPSHOT_SOURCES = {
    "vehicles": (VehicleModel, VehicleOut),
    "vehicleUnits": (VehicleUnit, UnitOut),
    "spareParts": (SparePart, SparePartOut),
    "transactions": (PartTransaction, TransactionOut),
    "sales": (Sale, SaleOut),
    "bikeServices": (ServiceRecord, ServiceRecordOut),
}


def load_snapshot(collection: str) -> list[dict]:
    model, schema = SNAPSHOT_SOURCES[collection]
    db = SessionLocal()
    try:
        rows = db.query(model).order_by(model.id).all()
        if model is SparePart:
            rows = [annotate(r) for r in rows]
        return [schema.model_validate(r).model_dump(mode="json") for r in rows]
    finally:
        db.close()


async def _pump(websocket: WebSocket, queue: asyncio.Queue):
    while True:
        await websocket.send_json(await queue.get())


async def _collect(sender: asyncio.Task, collection: str):
    try:
        await sender
    except Exception as e:
        logger.warning(f"[FEED] Sender on {collection} stopped: {e}")


@router.websocket("/ws/{collection}")
async def stream_collection(websocket: WebSocket, collection: str):
    if collection not in COLLECTIONS:
        await websocket.close(code=1008)
        return
    await websocket.accept()

    loop = asyncio.get_running_loop()
    queue: asyncio.Queue = asyncio.Queue()

    def on_change(change):
        # Writers run in the threadpool; hand the diff over to this loop
        loop.call_soon_threadsafe(queue.put_nowait, change.to_dict())

    with feed.subscribe(collection, on_change):
        snapshot = await asyncio.to_thread(load_snapshot, collection)
        await websocket.send_json({"type": "snapshot", "collection": collection, "data": snapshot})
        sender = asyncio.create_task(_pump(websocket, queue))
        try:
            while True:
                await websocket.receive_text()
        except WebSocketDisconnect:
            logger.info(f"[FEED] WebSocket on {collection} closed")
        finally:
            sender.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await _collect(sender, collection)

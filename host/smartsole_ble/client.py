# client.py
import asyncio
import logging
import time
from typing import Callable, Optional

from bleak import BleakClient, BleakScanner

from smartsole.config import DEVICE_NAME, SCAN_TIMEOUT_S
from smartsole.models import SensorSample
from . import uuids
from .json_writer import JSONLinesWriter
from .parser import LineBuffer, parse_line

logger = logging.getLogger(__name__)

SampleCallback = Callable[[SensorSample], None]


async def find_device(name: Optional[str] = DEVICE_NAME, address: Optional[str] = None):
    """
    Scan for a device whose name contains `name`, unless an address is given.
    """
    if address:
        return address
    logger.info("Scanning for '%s'...", name)
    dev = await BleakScanner.find_device_by_filter(
        lambda d, ad: (d.name is not None) and (name in d.name),
        timeout=SCAN_TIMEOUT_S,
    )
    if not dev:
        raise RuntimeError(f"Device '{name}' not found")
    logger.info("Found: %s (%s)", dev.name, dev.address)
    return dev


def make_notify_handler(on_sample: SampleCallback, writer: Optional[JSONLinesWriter] = None):
    """
    Turns TX notifications into samples. Malformed lines are dropped here and
    never reach the pipeline.
    """
    lines = LineBuffer()

    def handler(_sender, data: bytearray):
        for line in lines.feed(bytes(data)):
            sample = parse_line(line)
            if sample is None:
                logger.debug("Malformed line dropped: %r", line)
                continue
            if writer is not None:
                writer.append({"ts": time.time(), **sample.to_dict()})
            on_sample(sample)

    return handler


async def stream_samples(on_sample: SampleCallback,
                         name: Optional[str] = DEVICE_NAME,
                         address: Optional[str] = None,
                         writer: Optional[JSONLinesWriter] = None,
                         stop_event: Optional[asyncio.Event] = None):
    """
    Connect, subscribe to the UART TX characteristic and deliver samples in
    arrival order until stop_event is set or the link drops.
    """
    target = await find_device(name, address)
    disconnected = asyncio.Event()
    stop_event = stop_event or asyncio.Event()

    def on_disconnect(_client):
        logger.warning("Disconnected from insole")
        disconnected.set()

    async with BleakClient(target, disconnected_callback=on_disconnect) as client:
        logger.info("Connected to %s", getattr(target, "name", target))
        await client.start_notify(uuids.UART_TX_CHAR, make_notify_handler(on_sample, writer))
        logger.info("Notifications enabled")

        stop_task = asyncio.create_task(stop_event.wait())
        drop_task = asyncio.create_task(disconnected.wait())
        try:
            await asyncio.wait({stop_task, drop_task}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            stop_task.cancel()
            drop_task.cancel()

        if client.is_connected:
            await client.stop_notify(uuids.UART_TX_CHAR)

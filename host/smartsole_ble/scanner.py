# scanner.py
import asyncio
import sys

from bleak import BleakScanner

from smartsole.config import DEVICE_NAME, SCAN_TIMEOUT_S


async def scan(timeout: float = SCAN_TIMEOUT_S):
    print(f"Scanning for {timeout:.0f} seconds…")
    devs = await BleakScanner.discover(timeout=timeout)
    for d in devs:
        mark = "  <- insole" if d.name == DEVICE_NAME else ""
        print(f"{d.name or '(no name)'}\t{d.address}{mark}")
    return devs


def main():
    if sys.platform.startswith("win"):
        asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())
    asyncio.run(scan())


if __name__ == "__main__":
    main()

# file: aqi_alert/main.py

import argparse
import asyncio
import logging
import os
import sys
from typing import List, Optional

import aiohttp

from aqi_alert.cnemc_api import FetchError, create_ssl_context, fetch_station_readings
from aqi_alert.config import DEFAULT_ENV_FILE, AlertConfig, ConfigError, resolve_config
from aqi_alert.detection import find_problem_stations
from aqi_alert.notifier import notify_all
from aqi_alert.utils import resolve_alert_time

ALL_CLEAR_MESSAGE = "所有（非忽略名单）站点数据正常"


def summary_message(problem_count: int) -> str:
    if problem_count == 0:
        return ALL_CLEAR_MESSAGE
    return f"发现 {problem_count} 个异常站点（已排除忽略名单）"


async def run(config: AlertConfig, session: Optional[aiohttp.ClientSession] = None) -> int:
    """Fetch, detect and notify once. Returns the number of problem stations."""
    if session is None:
        connector = aiohttp.TCPConnector(ssl=create_ssl_context())
        async with aiohttp.ClientSession(connector=connector) as session:
            return await run(config, session)

    readings = await fetch_station_readings(session, config.http_timeout_sec)
    problem_stations = find_problem_stations(readings)

    if problem_stations:
        alert_time = resolve_alert_time(problem_stations, config.tzinfo)
        await notify_all(session, config, problem_stations, alert_time)

    print(summary_message(len(problem_stations)))
    return len(problem_stations)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="aqi-alert",
        description="Alert WeCom/DingTalk when Guangzhou monitoring stations publish incomplete data.",
    )
    parser.add_argument("--env-file", default=os.getenv("AQI_ALERT_ENV_FILE", DEFAULT_ENV_FILE),
                        help="key=value file holding WEBHOOK_KEY / DINGTALK_ACCESS_TOKEN (default: .env)")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format='%(asctime)s - %(levelname)s - %(message)s')

    try:
        config = resolve_config(args.env_file)
    except ConfigError as e:
        logging.error(f"Configuration error: {e}")
        return 1

    try:
        asyncio.run(run(config))
    except FetchError as e:
        logging.error(f"Failed to fetch data: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())

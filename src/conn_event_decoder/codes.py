"""Numeric codes carried in connection-event records.

Devices send event codes as integers to keep each record small; the
names below are the ones the firmware uses.  ``ResetReason`` values only
appear as the data value of :attr:`EventCode.RESET_REASON` records.
"""

import enum


class EventCode(enum.IntEnum):
    """Connection event codes (record field 2)."""

    SETUP_STARTED = 0
    CELLULAR_READY = 1
    CLOUD_CONNECTED = 2
    LISTENING_ENTERED = 3
    MODEM_RESET = 4
    REBOOT_LISTENING = 5
    REBOOT_NO_CLOUD = 6
    PING_DNS = 7
    PING_API = 8
    APP_WATCHDOG = 9
    TESTER_RESET = 10
    TESTER_APP_WATCHDOG = 11
    TESTER_SLEEP = 12
    LOW_BATTERY_SLEEP = 13
    SESSION_EVENT_LOST = 14
    SESSION_RESET = 15
    TESTER_RESET_SESSION = 16
    TESTER_RESET_MODEM = 17
    RESET_REASON = 18
    TESTER_SAFE_MODE = 19
    TESTER_PING = 20
    STOP_SLEEP_WAKE = 21


class ResetReason(enum.IntEnum):
    """System reset reasons reported with ``RESET_REASON`` events."""

    RESET_REASON_NONE = 0
    RESET_REASON_UNKNOWN = 10
    RESET_REASON_PIN_RESET = 20
    RESET_REASON_POWER_MANAGEMENT = 30
    RESET_REASON_POWER_DOWN = 40
    RESET_REASON_POWER_BROWNOUT = 50
    RESET_REASON_WATCHDOG = 60
    RESET_REASON_UPDATE = 70
    RESET_REASON_UPDATE_ERROR = 80
    RESET_REASON_UPDATE_TIMEOUT = 90
    RESET_REASON_FACTORY_RESET = 100
    RESET_REASON_SAFE_MODE = 110
    RESET_REASON_DFU_MODE = 120
    RESET_REASON_PANIC = 130
    RESET_REASON_USER = 140

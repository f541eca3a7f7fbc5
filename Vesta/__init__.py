"""
 _    __          __
| |  / /__  _____/ /_____ _
| | / / _ \/ ___/ __/ __ `/
| |/ /  __(__  ) /_/ /_/ /
|___/\___/____/\__/\__,_/

Vesta Project - An asyncio client for the Vesta classifieds marketplace.

Covers real estate, vehicle, land and workplace listings: browsing, filtering,
favorites, messaging, notifications, comparison and admin statistics.
"""

__version__ = "1.0.0"

"""
Basic usage example for tzresolve

Demonstrates:
- Resolving IANA and fixed offset names
- Allowing legacy names with a class mask
- Checking names without raising

Note: This example assumes you've compiled the database with at least
Europe/Warsaw and US/Pacific, e.g.:
    tzresolve-build --source ~/src/tzdata-2025a Europe/Warsaw US/Pacific
"""

from datetime import datetime, timezone

from tzresolve import Class, DisallowedClass, exists, resolve

# Standard IANA zone
warsaw = resolve("Europe/Warsaw")
print(f"Timezone: {warsaw}")

# Compare offsets at different times of year
print("\n--- Seasonal offset comparison ---")
winter = datetime(2024, 1, 15, 12, 0, tzinfo=warsaw)
summer = datetime(2024, 7, 15, 12, 0, tzinfo=warsaw)
print(f"January 15 offset: {winter.utcoffset()} ({winter.tzname()})")
print(f"July 15 offset: {summer.utcoffset()} ({summer.tzname()})")

# Converting from UTC
now = datetime.now(timezone.utc).astimezone(warsaw)
print(f"\nCurrent time in Warsaw: {now}")

# Fixed offsets never need the database
plus_two = resolve("UTC+02:00")
print(f"\nFixed zone: {plus_two} offset {plus_two.utcoffset(None)}")

# Legacy names are rejected unless the mask allows them
print("\n--- Legacy names ---")
try:
    resolve("US/Pacific")
except DisallowedClass as e:
    print(f"Rejected: {e}")

pacific = resolve("US/Pacific", Class.LEGACY)
print(f"Allowed with Class.LEGACY: {pacific}")

# exists() answers without raising
print("\n--- Existence checks ---")
for name in ["UTC+02:00", "Europe/Warsaw", "US/Pacific", "Mars/Olympus_Mons"]:
    print(f"  {name}: {exists(name)} (legacy allowed: {exists(name, Class.ALL)})")

"""Default Gardena catalog served by the simulated transport."""

from typing import Any, Dict, List

DEFAULT_DEVICES: List[Dict[str, Any]] = [
    {
        "id": "smart-irrigation-1",
        "name": "Smart Irrigation Controller",
        "type": "IRRIGATION_CONTROLLER",
        "category": "irrigation",
        "value": 0,
        "connected": True,
    },
    {
        "id": "soil-sensor-1",
        "name": "Soil Humidity Sensor",
        "type": "SOIL_HUMIDITY_SENSOR",
        "category": "sensor",
        "value": 65,
        "batteryLevel": 85,
        "connected": True,
    },
    {
        "id": "water-valve-1",
        "name": "Smart Water Valve",
        "type": "WATER_VALVE",
        "category": "valve",
        "value": 0,
        "connected": True,
    },
    {
        "id": "smart-mower-1",
        "name": "Smart Lawn Mower",
        "type": "ROBOTIC_MOWER",
        "category": "mower",
        "value": "idle",
        "batteryLevel": 90,
        "connected": True,
    },
]

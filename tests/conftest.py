from __future__ import annotations

from typing import Any

import pytest


@pytest.fixture
def rover_payloads() -> list[dict[str, Any]]:
    return [
        {
            "id": 5,
            "name": "Curiosity",
            "landing_date": "2012-08-06",
            "launch_date": "2011-11-26",
            "status": "active",
            "max_sol": "4102",
            "max_date": "2024-02-19",
            "total_photos": 695670,
            "cameras": [{"name": "FHAZ", "full_name": "Front Hazard Avoidance Camera"}],
        },
        {
            "id": 7,
            "name": "Spirit",
            "landing_date": "2004-01-04",
            "launch_date": "2003-06-10",
            "status": "complete",
            "max_sol": 2208,
            "max_date": "2010-03-21",
            "total_photos": 124550,
        },
    ]


@pytest.fixture
def photo_payloads() -> list[dict[str, Any]]:
    return [
        {
            "id": 1201,
            "sol": 4102,
            "camera": {"id": 20, "name": "FHAZ", "rover_id": 5, "full_name": "Front Hazard Avoidance Camera"},
            "img_src": "https://mars.example/curiosity/1201.jpg",
            "earth_date": "2024-02-19",
            "rover": {"id": 5, "name": "Curiosity", "status": "active"},
        },
        {
            "id": 1202,
            "img_src": "https://mars.example/curiosity/1202.jpg",
            "earth_date": "",
            "camera": None,
        },
    ]

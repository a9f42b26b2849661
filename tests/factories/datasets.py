"""Reference dataset fixtures and a fake HTTP server for them."""

import asyncio
from collections import Counter
from typing import Any

import httpx

from eventform.data.loader import FALLBACK_URLS
from eventform.data.models import ResourceKey

LOCATIONS: dict[str, Any] = {
    "COL": {
        "nombre": "Colombia",
        "departamentos": [
            {
                "codigo": "05",
                "nombre": "Antioquia",
                "ciudades": [
                    {"codigo": "05001", "nombre": "Medellín"},
                    {"codigo": "05088", "nombre": "Bello"},
                ],
            },
            {
                "codigo": "11",
                "nombre": "Bogotá D.C.",
                "ciudades": [{"codigo": "11001", "nombre": "Bogotá"}],
            },
            {
                "codigo": "91",
                "nombre": "Amazonas",
                "ciudades": [{"codigo": "91001", "nombre": "Leticia"}],
            },
            {
                "codigo": "76",
                "nombre": "Valle del Cauca",
                "ciudades": [
                    {"codigo": "76001", "nombre": "Cali"},
                    {"codigo": "76109", "nombre": "Buenaventura"},
                ],
            },
        ],
    },
    "MEX": {"nombre": "México", "departamentos": []},
    "PER": {"name": "Perú", "departments": []},
}

PREFIXES: list[dict[str, str]] = [
    {"iso2": "MX", "phoneCode": "52", "nameES": "México"},
    {"iso2": "CO", "phoneCode": "57", "nameES": "Colombia"},
    {"iso2": "PE", "phoneCode": "51", "nameES": "Perú"},
]

PROGRAMS: dict[str, Any] = {
    "PREG": {
        "Ingeniería": {
            "Programas": [
                {"Codigo": "ISIS", "Nombre": "Ingeniería de Sistemas"},
                {"Codigo": "ICIV", "Nombre": "Ingeniería Civil"},
            ]
        },
        "Ciencias": {
            "Programas": [{"Codigo": "BIOL", "Nombre": "Biología"}],
        },
    },
    "GRAD": [
        {"codigo": "MISO", "nombre": "Maestría en Ingeniería de Software", "facultad": "Ingeniería"},
        {"codigo": "MADM", "nombre": "MBA", "facultad": "Ciencias Económicas"},
    ],
}

PERIODS: dict[str, Any] = {
    "PREG": {"2026-1": "202610", "2026-2": "202630"},
    "GRAD": {"2026-2": "202630"},
}

COLLEGES: dict[str, Any] = {
    "cuentasInstitucionales": [
        {
            "ID": "1",
            "NAME": "Colegio San Bartolomé La Merced",
            "PUJ_EXTERNALORGID__C": "C001",
            "SHIPPINGCITY": "Bogotá D.C.",
            "PUJ_CALENDAR__C": "Calendario A",
        },
        {
            "ID": "2",
            "NAME": "Gimnasio Moderno",
            "PUJ_EXTERNALORGID__C": "C002",
            "SHIPPINGCITY": "Bogotá",
            "PUJ_CALENDAR__C": "B",
        },
        {
            "ID": "3",
            "NAME": "Liceo Francés",
            "PUJ_EXTERNALORGID__C": "C003",
            "SHIPPINGCITY": "Santiago de Cali",
            "PUJ_CALENDAR__C": "B",
        },
        {
            "ID": "1",
            "NAME": "Colegio San Bartolomé La Merced",
            "PUJ_EXTERNALORGID__C": "C001",
            "SHIPPINGCITY": "Bogotá D.C.",
            "PUJ_CALENDAR__C": "Calendario A",
        },
    ]
}

UNIVERSITIES: dict[str, Any] = {
    "cuentasInstitucionales": [
        {"ID": "u1", "NAME": "Universidad Nacional de Colombia", "PUJ_EXTERNALORGID__C": "U001"},
        {"ID": "u2", "NAME": "Universidad de los Andes", "PUJ_EXTERNALORGID__C": "U002"},
    ]
}

DEFAULT_DATASETS: dict[ResourceKey, Any] = {
    ResourceKey.LOCATIONS: LOCATIONS,
    ResourceKey.PREFIXES: PREFIXES,
    ResourceKey.PROGRAMS: PROGRAMS,
    ResourceKey.PERIODS: PERIODS,
    ResourceKey.COLLEGES: COLLEGES,
    ResourceKey.UNIVERSITIES: UNIVERSITIES,
}


def first_remote_url(key: ResourceKey) -> str:
    return next(url for url in FALLBACK_URLS[key] if url.startswith("http"))


class DatasetServer:
    """In-memory HTTP server for ``httpx.MockTransport``.

    Unknown URLs answer 404. Every request is counted per URL, in order.
    """

    def __init__(self) -> None:
        self.routes: dict[str, Any] = {}
        self.raw: dict[str, bytes] = {}
        self.failures: dict[str, int] = {}
        self.requests: list[str] = []
        self.delay: float = 0.0

    @classmethod
    def with_defaults(cls) -> "DatasetServer":
        server = cls()
        for key, data in DEFAULT_DATASETS.items():
            server.serve(first_remote_url(key), data)
        return server

    def serve(self, url: str, data: Any) -> None:
        self.routes[url] = data

    def serve_raw(self, url: str, body: bytes) -> None:
        self.raw[url] = body

    def fail(self, url: str, status: int = 500) -> None:
        self.failures[url] = status

    @property
    def counts(self) -> Counter[str]:
        return Counter(self.requests)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self._handle)

    async def _handle(self, request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        self.requests.append(url)
        if self.delay:
            await asyncio.sleep(self.delay)
        if url in self.failures:
            return httpx.Response(self.failures[url])
        if url in self.raw:
            return httpx.Response(200, content=self.raw[url])
        if url in self.routes:
            return httpx.Response(200, json=self.routes[url])
        return httpx.Response(404)

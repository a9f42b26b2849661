"""Normalization of raw reference datasets into ``Option`` lists.

The upstream JSON files come in several historical shapes (Spanish and
English location keys, nested and flat program lists, two period
layouts). Everything past this module sees only ``Option``.
"""

from collections.abc import Iterable, Mapping
from typing import Any

from eventform.data.loader import DataLoader
from eventform.data.models import Option, ResourceKey
from eventform.errors import DatasetFormatError

LEVEL_NAMES: dict[str, str] = {
    "PREG": "Pregrado",
    "GRAD": "Posgrado",
    "ECLE": "Eclesiástico",
    "ETDH": "Técnico",
}

ALL_LEVELS = "TODOS"


def _pick(record: Mapping[str, Any], *names: str, default: Any = None) -> Any:
    for name in names:
        value = record.get(name)
        if value not in (None, ""):
            return value
    return default


def _text(value: Any) -> str:
    return "" if value is None else str(value).strip()


def _unique(options: Iterable[Option]) -> list[Option]:
    seen: set[str] = set()
    result = []
    for option in options:
        if option.value in seen:
            continue
        seen.add(option.value)
        result.append(option)
    return result


def location_options(records: Iterable[Mapping[str, Any]]) -> list[Option]:
    """Departments or cities (``codigo``/``nombre`` or ``code``/``name``)."""
    options = []
    for record in records:
        if not isinstance(record, Mapping):
            continue
        value = _text(_pick(record, "codigo", "code", "Codigo"))
        label = _text(_pick(record, "nombre", "name", "Nombre", default=value))
        if value:
            options.append(Option(value=value, label=label))
    return options


def program_option(record: Mapping[str, Any], level: str, faculty: str) -> Option | None:
    value = _text(_pick(record, "Codigo", "codigo", "code"))
    if not value:
        return None
    label = _text(_pick(record, "Nombre", "nombre", "name", default=value))
    return Option(value=value, label=label, meta={"level": level, "faculty": faculty})


def institution_options(data: Any, resource: ResourceKey) -> list[Option]:
    """Colleges or universities from a ``cuentasInstitucionales`` document.

    Records are de-duplicated by ``ID``; the first occurrence wins.
    """
    if isinstance(data, Mapping):
        records = data.get("cuentasInstitucionales")
    else:
        records = data
    if not isinstance(records, list):
        raise DatasetFormatError(resource.value, "expected 'cuentasInstitucionales' list")

    seen_ids: set[str] = set()
    options = []
    for record in records:
        if not isinstance(record, Mapping):
            continue
        record_id = _text(record.get("ID"))
        if record_id and record_id in seen_ids:
            continue
        value = _text(record.get("PUJ_EXTERNALORGID__C"))
        label = _text(record.get("NAME"))
        if not value or not label:
            continue
        seen_ids.add(record_id)
        options.append(
            Option(
                value=value,
                label=label,
                meta={
                    "id": record_id,
                    "city": _text(record.get("SHIPPINGCITY")),
                    "calendar": _text(record.get("PUJ_CALENDAR__C")),
                },
            )
        )
    return options


class DataCatalog:
    """Typed views over the reference datasets of a form."""

    def __init__(self, loader: DataLoader) -> None:
        self.loader = loader

    # Locations

    async def _locations(self) -> Mapping[str, Any]:
        data = await self.loader.load_resource(ResourceKey.LOCATIONS)
        if not isinstance(data, Mapping):
            raise DatasetFormatError(ResourceKey.LOCATIONS.value, "expected an object keyed by country")
        return data

    async def countries(self) -> list[Option]:
        locations = await self._locations()
        options = []
        for code, country in locations.items():
            name = _pick(country, "nombre", "name", default=code) if isinstance(country, Mapping) else code
            options.append(Option(value=str(code), label=_text(name)))
        return options

    async def _departments(self, country: str) -> list[Mapping[str, Any]]:
        locations = await self._locations()
        entry = locations.get(country)
        if not isinstance(entry, Mapping):
            return []
        departments = _pick(entry, "departamentos", "departments", default=[])
        return departments if isinstance(departments, list) else []

    async def departments(self, country: str) -> list[Option]:
        """Departments of a country; ``meta["cities"]`` lists their cities."""
        options = []
        for record in await self._departments(country):
            base = location_options([record])
            if not base:
                continue
            cities = location_options(_pick(record, "ciudades", "cities", default=[]))
            options.append(
                base[0].model_copy(
                    update={"meta": {"cities": [(c.value, c.label) for c in cities]}}
                )
            )
        return options

    async def cities(self, country: str, department: str) -> list[Option]:
        for record in await self._departments(country):
            if _text(_pick(record, "codigo", "code", "Codigo")) == department:
                return location_options(_pick(record, "ciudades", "cities", default=[]))
        return []

    # Phone prefixes

    async def prefixes(self) -> list[Option]:
        data = await self.loader.load_resource(ResourceKey.PREFIXES)
        if not isinstance(data, list):
            raise DatasetFormatError(ResourceKey.PREFIXES.value, "expected a list")
        options = []
        for record in data:
            if not isinstance(record, Mapping):
                continue
            code = _text(record.get("phoneCode"))
            name = _text(record.get("nameES"))
            if not code or not name:
                continue
            options.append(
                Option(
                    value=code,
                    label=f"{name} (+{code})",
                    meta={"iso2": _text(record.get("iso2")), "name": name},
                )
            )
        return _unique(options)

    # Academic

    async def _programs(self) -> Mapping[str, Any]:
        data = await self.loader.load_resource(ResourceKey.PROGRAMS)
        if not isinstance(data, Mapping):
            raise DatasetFormatError(ResourceKey.PROGRAMS.value, "expected an object keyed by level")
        return data

    async def academic_levels(self) -> list[Option]:
        programs = await self._programs()
        return [Option(value=code, label=LEVEL_NAMES.get(code, code)) for code in programs]

    async def faculties(self, level: str) -> list[Option]:
        level_programs = (await self._programs()).get(level)
        if isinstance(level_programs, Mapping):
            names = [str(name) for name in level_programs]
        elif isinstance(level_programs, list):
            names = [
                _text(p.get("facultad"))
                for p in level_programs
                if isinstance(p, Mapping) and _text(p.get("facultad"))
            ]
        else:
            return []
        return _unique(Option(value=name, label=name) for name in names)

    async def programs(self, level: str, faculty: str | None = None) -> list[Option]:
        """Programs of a level, optionally restricted to one faculty."""
        level_programs = (await self._programs()).get(level)
        options: list[Option] = []

        if isinstance(level_programs, Mapping):
            for faculty_name, faculty_data in level_programs.items():
                if faculty and faculty_name != faculty:
                    continue
                records = faculty_data.get("Programas", []) if isinstance(faculty_data, Mapping) else []
                for record in records:
                    if isinstance(record, Mapping):
                        option = program_option(record, level, str(faculty_name))
                        if option:
                            options.append(option)
        elif isinstance(level_programs, list):
            for record in level_programs:
                if not isinstance(record, Mapping):
                    continue
                record_faculty = _text(record.get("facultad"))
                if faculty and record_faculty != faculty:
                    continue
                option = program_option(record, level, record_faculty)
                if option:
                    options.append(option)

        return _unique(options)

    async def periods(self, level: str | None = None) -> list[Option]:
        """Admission periods, for one level or for all of them."""
        data = await self.loader.load_resource(ResourceKey.PERIODS)

        if isinstance(data, list):
            options = []
            for record in data:
                if not isinstance(record, Mapping):
                    continue
                record_level = _text(record.get("nivel_academico"))
                if level and record_level not in (level, ALL_LEVELS):
                    continue
                value = _text(_pick(record, "codigo", "Codigo", "code"))
                if value:
                    label = _text(_pick(record, "nombre", "Nombre", "name", default=value))
                    options.append(Option(value=value, label=label, meta={"level": record_level}))
            return _unique(options)

        if isinstance(data, Mapping):
            levels = [level] if level else list(data)
            options = []
            for lvl in levels:
                entries = data.get(lvl)
                if not isinstance(entries, Mapping):
                    continue
                for name, code in entries.items():
                    options.append(Option(value=_text(code), label=str(name), meta={"level": lvl}))
            return _unique(options)

        raise DatasetFormatError(ResourceKey.PERIODS.value, "expected a list or an object keyed by level")

    # Institutions

    async def colleges(self) -> list[Option]:
        data = await self.loader.load_resource(ResourceKey.COLLEGES)
        return institution_options(data, ResourceKey.COLLEGES)

    async def universities(self) -> list[Option]:
        data = await self.loader.load_resource(ResourceKey.UNIVERSITIES)
        return institution_options(data, ResourceKey.UNIVERSITIES)

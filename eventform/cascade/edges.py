"""Standard cascades of the event-registration form.

Location: country -> department -> city, active only for the default
country. Academic: attendee type -> level -> faculty -> program -> period,
active only for applicants. Institutions: colleges for applicants and
school counsellors, universities for everyone.

Allow-lists come from ``FilterConfig``. An empty list keeps the whole
dataset. City and program allow-lists are scoped: inside a department (or
faculty) that contains none of the configured entries, every entry of that
department (or faculty) is kept.
"""

from collections.abc import Sequence

from eventform.cascade.matching import (
    calendars_match,
    cities_match,
    matches_any,
    names_match,
)
from eventform.cascade.models import DependencyEdge, OptionSource, Values
from eventform.config.models.filters import FilterConfig
from eventform.config.models.form import FormDefaults
from eventform.data.catalog import DataCatalog
from eventform.data.models import Option
from eventform.state.fields import AttendeeType, FieldKey


def allow(options: list[Option], allow_list: Sequence[str]) -> list[Option]:
    """Keep options named by the allow-list; everything when it is empty."""
    if not allow_list:
        return options
    return [option for option in options if matches_any(option, allow_list)]


def allow_scoped(options: list[Option], allow_list: Sequence[str]) -> list[Option]:
    """Like ``allow``, but keep everything when no entry matches this scope."""
    kept = allow(options, allow_list)
    return kept or options


def _city_options(department: Option) -> list[Option]:
    return [Option(value=code, label=name) for code, name in department.meta.get("cities", [])]


class StandardCascades:
    """Builds the option sources and dependency edges of the form."""

    def __init__(
        self,
        catalog: DataCatalog,
        filters: FilterConfig | None = None,
        defaults: FormDefaults | None = None,
    ) -> None:
        self.catalog = catalog
        self.filters = filters or FilterConfig()
        self.defaults = defaults or FormDefaults()

    def sources(self) -> list[OptionSource]:
        return [
            OptionSource(
                field=FieldKey.COUNTRY,
                loader=self._countries,
                config_filter=lambda options, _: allow(options, self.filters.countries),
                collapse_if_single=True,
                priority=self.filters.country_priority,
            ),
            OptionSource(
                field=FieldKey.PHONE_CODE,
                loader=self._prefixes,
                priority=self.filters.country_priority,
            ),
            OptionSource(
                field=FieldKey.TYPE_ATTENDEE,
                loader=self._attendee_types,
                collapse_if_single=True,
            ),
            OptionSource(
                field=FieldKey.ATTENDANCE_DAY,
                loader=self._attendance_days,
                collapse_if_single=True,
            ),
            OptionSource(
                field=FieldKey.UNIVERSITY,
                loader=self._universities,
                config_filter=self._filter_universities,
            ),
        ]

    def edges(self) -> list[DependencyEdge]:
        default_country = self.defaults.default_country
        applicant = self.defaults.applicant_type
        no_program = self.defaults.non_applicant_program

        return [
            DependencyEdge(
                parent=FieldKey.COUNTRY,
                children=[FieldKey.DEPARTMENT, FieldKey.CITY],
                loader=self._departments,
                when=lambda value: value == default_country,
                priority=self.filters.department_priority,
            ),
            DependencyEdge(
                parent=FieldKey.DEPARTMENT,
                children=[FieldKey.CITY],
                loader=self._cities,
                config_filter=lambda options, _: allow_scoped(options, self.filters.cities),
            ),
            DependencyEdge(
                parent=FieldKey.TYPE_ATTENDEE,
                children=[
                    FieldKey.ACADEMIC_LEVEL,
                    FieldKey.FACULTY,
                    FieldKey.PROGRAM,
                    FieldKey.ADMISSION_PERIOD,
                ],
                loader=self._academic_levels,
                when=lambda value: value == applicant,
            ),
            DependencyEdge(
                parent=FieldKey.ACADEMIC_LEVEL,
                children=[FieldKey.FACULTY, FieldKey.PROGRAM, FieldKey.ADMISSION_PERIOD],
                loader=self._faculties,
            ),
            DependencyEdge(
                parent=FieldKey.FACULTY,
                children=[FieldKey.PROGRAM, FieldKey.ADMISSION_PERIOD],
                loader=self._programs,
                config_filter=lambda options, _: allow_scoped(options, self.filters.programs),
            ),
            DependencyEdge(
                parent=FieldKey.PROGRAM,
                children=[FieldKey.ADMISSION_PERIOD],
                loader=self._periods,
                when=lambda value: value != no_program,
            ),
            DependencyEdge(
                parent=FieldKey.TYPE_ATTENDEE,
                children=[FieldKey.COLLEGE],
                loader=self._colleges,
                config_filter=self._filter_colleges,
                when=lambda value: value in (AttendeeType.APPLICANT, AttendeeType.TEACHER),
                collapse_if_single=False,
            ),
        ]

    # Sources

    async def _countries(self, values: Values) -> list[Option]:
        return await self.catalog.countries()

    async def _prefixes(self, values: Values) -> list[Option]:
        return await self.catalog.prefixes()

    async def _attendee_types(self, values: Values) -> list[Option]:
        return [Option(value=name, label=name) for name in self.filters.attendee_types]

    async def _attendance_days(self, values: Values) -> list[Option]:
        return [Option(value=day, label=day) for day in self.filters.attendance_days]

    async def _universities(self, values: Values) -> list[Option]:
        return await self.catalog.universities()

    def _filter_universities(self, options: list[Option], values: Values) -> list[Option]:
        configured = self.filters.universities
        if not configured:
            return options
        return [o for o in options if any(names_match(o.label, name) for name in configured)]

    # Location

    async def _departments(self, country: str, values: Values) -> list[Option]:
        departments = await self.catalog.departments(country)
        configured_departments = self.filters.departments
        configured_cities = self.filters.cities

        if configured_departments:
            departments = allow(departments, configured_departments)
        elif configured_cities:
            departments = [
                d for d in departments
                if allow(_city_options(d), configured_cities)
            ]

        enriched = []
        for department in departments:
            cities = allow_scoped(_city_options(department), configured_cities)
            if len(cities) == 1:
                city = cities[0]
                department = department.with_label(f"{department.label} - {city.label}")
            enriched.append(department)
        return enriched

    async def _cities(self, department: str, values: Values) -> list[Option]:
        country = values.get(FieldKey.COUNTRY) or self.defaults.default_country
        return await self.catalog.cities(country, department)

    # Academic

    async def _academic_levels(self, attendee_type: str, values: Values) -> list[Option]:
        levels = await self.catalog.academic_levels()
        if self.filters.academic_levels:
            return allow(levels, self.filters.academic_levels)
        if self.filters.programs or self.filters.faculties:
            return [level for level in levels if await self._faculties(level.value, values)]
        return levels

    async def _faculties(self, level: str, values: Values) -> list[Option]:
        faculties = await self.catalog.faculties(level)
        if self.filters.programs:
            kept = []
            for faculty in faculties:
                programs = await self.catalog.programs(level, faculty.value)
                if allow(programs, self.filters.programs):
                    kept.append(faculty)
            return kept
        return allow(faculties, self.filters.faculties)

    async def _programs(self, faculty: str, values: Values) -> list[Option]:
        level = values.get(FieldKey.ACADEMIC_LEVEL, "")
        return await self.catalog.programs(level, faculty)

    async def _periods(self, program: str, values: Values) -> list[Option]:
        level = values.get(FieldKey.ACADEMIC_LEVEL) or None
        return await self.catalog.periods(level)

    # Institutions

    async def _colleges(self, attendee_type: str, values: Values) -> list[Option]:
        return await self.catalog.colleges()

    def _filter_colleges(self, options: list[Option], values: Values) -> list[Option]:
        names = self.filters.colleges
        cities = self.filters.college_cities
        calendars = self.filters.college_calendars

        kept = options
        if names:
            kept = [o for o in kept if any(names_match(o.label, n) for n in names)]
        if cities:
            kept = [o for o in kept if any(cities_match(o.meta.get("city"), c) for c in cities)]
        if calendars:
            kept = [
                o for o in kept
                if any(calendars_match(o.meta.get("calendar"), c) for c in calendars)
            ]

        seen: set[str] = set()
        unique = []
        for option in kept:
            key = option.meta.get("id") or option.value
            if key in seen:
                continue
            seen.add(key)
            unique.append(option)
        return unique

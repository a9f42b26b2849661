"""Tests for the standard registration-form cascades."""

import pytest

from eventform.cascade import StandardCascades, allow, allow_scoped
from eventform.config.models.filters import FilterConfig
from eventform.data import DataCatalog, Option


@pytest.fixture
def catalog(make_loader) -> DataCatalog:
    return DataCatalog(make_loader())


def cascades(catalog: DataCatalog, **filters) -> StandardCascades:
    return StandardCascades(catalog, FilterConfig(**filters))


def edge(standard: StandardCascades, parent: str, target: str):
    return next(e for e in standard.edges() if e.parent == parent and e.target == target)


def source(standard: StandardCascades, field: str):
    return next(s for s in standard.sources() if s.field == field)


def labels(options: list[Option]) -> list[str]:
    return [o.label for o in options]


class TestAllow:
    def test_empty_list_keeps_everything(self) -> None:
        options = [Option(value="a", label="A")]
        assert allow(options, []) == options

    def test_scoped_falls_back(self) -> None:
        options = [Option(value="76001", label="Cali"), Option(value="76109", label="Buenaventura")]
        assert allow_scoped(options, ["Medellín"]) == options
        assert allow_scoped(options, ["Cali"]) == options[:1]


class TestLocation:
    @pytest.mark.asyncio
    async def test_single_city_departments_enriched(self, catalog) -> None:
        departments = await edge(cascades(catalog), "country", "department").loader("COL", {})

        assert labels(departments) == [
            "Antioquia",
            "Bogotá D.C. - Bogotá",
            "Amazonas - Leticia",
            "Valle del Cauca",
        ]

    @pytest.mark.asyncio
    async def test_department_allow_list(self, catalog) -> None:
        standard = cascades(catalog, departments=["amazonas", "11"])
        departments = await edge(standard, "country", "department").loader("COL", {})

        assert [d.value for d in departments] == ["11", "91"]

    @pytest.mark.asyncio
    async def test_city_allow_list_selects_departments(self, catalog) -> None:
        standard = cascades(catalog, cities=["Medellin"])
        departments = await edge(standard, "country", "department").loader("COL", {})

        assert labels(departments) == ["Antioquia - Medellín"]

    @pytest.mark.asyncio
    async def test_cities_of_department(self, catalog) -> None:
        standard = cascades(catalog, cities=["Bello"])
        city_edge = edge(standard, "department", "city")

        cities = await city_edge.loader("05", {"country": "COL"})
        assert labels(city_edge.config_filter(cities, {})) == ["Bello"]

        cities = await city_edge.loader("76", {"country": "COL"})
        assert labels(city_edge.config_filter(cities, {})) == ["Cali", "Buenaventura"]

    def test_location_active_only_for_default_country(self, catalog) -> None:
        country_edge = edge(cascades(catalog), "country", "department")
        assert country_edge.is_active("COL")
        assert not country_edge.is_active("MEX")
        assert country_edge.children == ("department", "city")

    @pytest.mark.asyncio
    async def test_country_allow_list(self, catalog) -> None:
        country = source(cascades(catalog, countries=["Mexico", "PER"]), "country")
        options = country.config_filter(await country.loader({}), {})

        assert [o.value for o in options] == ["MEX", "PER"]


class TestAcademic:
    def test_academic_chain_active_for_applicants(self, catalog) -> None:
        level_edge = edge(cascades(catalog), "type_attendee", "academic_level")
        assert level_edge.is_active("Aspirante")
        assert not level_edge.is_active("Visitante PUJ")
        assert level_edge.children == ("academic_level", "faculty", "program", "admission_period")

    def test_periods_skip_non_applicant_program(self, catalog) -> None:
        period_edge = edge(cascades(catalog), "program", "admission_period")
        assert not period_edge.is_active("NOAP")
        assert period_edge.is_active("ISIS")

    @pytest.mark.asyncio
    async def test_program_filter_narrows_levels_and_faculties(self, catalog) -> None:
        standard = cascades(catalog, programs=["BIOL"])

        levels = await edge(standard, "type_attendee", "academic_level").loader("Aspirante", {})
        faculties = await edge(standard, "academic_level", "faculty").loader("PREG", {})

        assert [o.value for o in levels] == ["PREG"]
        assert [o.value for o in faculties] == ["Ciencias"]

    @pytest.mark.asyncio
    async def test_programs_use_selected_level(self, catalog) -> None:
        program_edge = edge(cascades(catalog), "faculty", "program")
        programs = await program_edge.loader("Ingeniería", {"academic_level": "GRAD"})

        assert [o.value for o in programs] == ["MISO"]

    @pytest.mark.asyncio
    async def test_periods_use_selected_level(self, catalog) -> None:
        period_edge = edge(cascades(catalog), "program", "admission_period")
        periods = await period_edge.loader("MISO", {"academic_level": "GRAD"})

        assert [o.value for o in periods] == ["202630"]


class TestInstitutions:
    @pytest.mark.asyncio
    async def test_colleges_for_applicants_and_teachers(self, catalog) -> None:
        college_edge = edge(cascades(catalog), "type_attendee", "college")

        assert college_edge.is_active("Aspirante")
        assert college_edge.is_active("Docente y/o psicoorientador")
        assert not college_edge.is_active("Visitante PUJ")
        assert college_edge.collapse_if_single is False

    @pytest.mark.asyncio
    async def test_college_city_and_calendar_filters(self, catalog) -> None:
        college_edge = edge(
            cascades(catalog, college_cities=["Bogotá"], college_calendars=["A"]),
            "type_attendee",
            "college",
        )
        colleges = await college_edge.loader("Aspirante", {})

        assert [o.value for o in college_edge.config_filter(colleges, {})] == ["C001"]

    @pytest.mark.asyncio
    async def test_college_name_filter(self, catalog) -> None:
        college_edge = edge(cascades(catalog, colleges=["Liceo Frances"]), "type_attendee", "college")
        colleges = await college_edge.loader("Aspirante", {})

        assert labels(college_edge.config_filter(colleges, {})) == ["Liceo Francés"]

    @pytest.mark.asyncio
    async def test_university_filter(self, catalog) -> None:
        university = source(
            cascades(catalog, universities=["Universidad Nal. de Colombia"]),
            "university",
        )
        options = university.config_filter(await university.loader({}), {})

        assert [o.value for o in options] == ["U001"]


class TestSources:
    @pytest.mark.asyncio
    async def test_attendee_types_from_config(self, catalog) -> None:
        attendee = source(cascades(catalog, attendee_types=["Aspirante"]), "type_attendee")

        assert [o.value for o in await attendee.loader({})] == ["Aspirante"]
        assert attendee.collapse_if_single

    @pytest.mark.asyncio
    async def test_attendance_days(self, catalog) -> None:
        days = source(cascades(catalog, attendance_days=["Sábado", "Domingo"]), "attendance_day")
        assert [o.value for o in await days.loader({})] == ["Sábado", "Domingo"]

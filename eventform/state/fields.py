"""Field schema of the event-registration form."""

from eventform.config.models.form import FormDefaults
from eventform.state.models import FieldDefinition


class FieldKey:
    """Field keys as submitted to the lead endpoint."""

    # Hidden lead fields
    OID = "oid"
    RET_URL = "retURL"
    DEBUG = "debug"
    DEBUG_EMAIL = "debugEmail"
    AUTHORIZATION_SOURCE = "authorizationSource"
    REQUEST_ORIGIN = "requestOrigin"
    LEAD_SOURCE = "lead_source"
    COMPANY = "company"

    # Personal
    FIRST_NAME = "first_name"
    LAST_NAME = "last_name"
    TYPE_DOC = "type_doc"
    DOCUMENT = "document"
    EMAIL = "email"
    PHONE_CODE = "phone_code"
    PHONE = "mobile"

    # Location
    COUNTRY = "country"
    DEPARTMENT = "department"
    CITY = "city"

    # Academic
    ACADEMIC_LEVEL = "academic_level"
    FACULTY = "faculty"
    PROGRAM = "program"
    ADMISSION_PERIOD = "admission_period"

    # Event
    TYPE_ATTENDEE = "type_attendee"
    ATTENDANCE_DAY = "attendance_day"
    COLLEGE = "college"
    UNIVERSITY = "university"
    DATA_AUTHORIZATION = "authorization_data"

    # UTM parameters
    SOURCE = "source"
    SUB_SOURCE = "subsource"
    MEDIUM = "medium"
    CAMPAIGN = "campaign"
    ARTICLE = "article"
    EVENT_NAME = "eventname"
    EVENT_DATE = "eventdate"


class AttendeeType:
    APPLICANT = "Aspirante"
    PARENT = "Padre de familia y/o acudiente"
    CURRENT_STUDENT = "Estudiante actual"
    GRADUATE = "Graduado"
    TEACHER = "Docente y/o psicoorientador"
    VISITOR = "Visitante PUJ"
    STAFF = "Administrativo PUJ"

    ALL = (APPLICANT, PARENT, CURRENT_STUDENT, GRADUATE, TEACHER, VISITOR, STAFF)


# Hidden until their option list is derived
DERIVED_FIELDS: frozenset[str] = frozenset({
    FieldKey.DEPARTMENT,
    FieldKey.CITY,
    FieldKey.ACADEMIC_LEVEL,
    FieldKey.FACULTY,
    FieldKey.PROGRAM,
    FieldKey.ADMISSION_PERIOD,
    FieldKey.COLLEGE,
    FieldKey.UNIVERSITY,
})


def default_field_definitions(defaults: FormDefaults | None = None) -> list[FieldDefinition]:
    """Build the field schema of the event-registration form.

    Args:
        defaults: Form defaults (country, phone code, lead fields, UTM values)

    Returns:
        Ordered field definitions
    """
    d = defaults or FormDefaults()

    def hidden(key: str, default: str = "") -> FieldDefinition:
        return FieldDefinition(key=key, default=default, visible=False)

    def field(key: str, default: str = "", *, required: bool = False) -> FieldDefinition:
        return FieldDefinition(
            key=key,
            default=default,
            visible=key not in DERIVED_FIELDS,
            required=required,
        )

    return [
        hidden(FieldKey.OID),
        hidden(FieldKey.RET_URL, d.ret_url),
        hidden(FieldKey.DEBUG, "1" if d.debug_mode else "0"),
        hidden(FieldKey.DEBUG_EMAIL, d.debug_email),
        hidden(FieldKey.AUTHORIZATION_SOURCE, d.authorization_source),
        hidden(FieldKey.REQUEST_ORIGIN, d.request_origin),
        hidden(FieldKey.LEAD_SOURCE, d.lead_source),
        hidden(FieldKey.COMPANY, d.company),
        field(FieldKey.FIRST_NAME, required=True),
        field(FieldKey.LAST_NAME, required=True),
        field(FieldKey.TYPE_DOC, required=True),
        field(FieldKey.DOCUMENT, required=True),
        field(FieldKey.EMAIL, required=True),
        field(FieldKey.PHONE_CODE, d.phone_code, required=True),
        field(FieldKey.PHONE, required=True),
        field(FieldKey.COUNTRY, d.default_country, required=True),
        field(FieldKey.DEPARTMENT),
        field(FieldKey.CITY),
        field(FieldKey.TYPE_ATTENDEE, d.attendee_type, required=True),
        field(FieldKey.ATTENDANCE_DAY),
        field(FieldKey.ACADEMIC_LEVEL),
        field(FieldKey.FACULTY),
        field(FieldKey.PROGRAM),
        field(FieldKey.ADMISSION_PERIOD),
        field(FieldKey.COLLEGE),
        field(FieldKey.UNIVERSITY),
        field(FieldKey.DATA_AUTHORIZATION),
        hidden(FieldKey.SOURCE, d.source),
        hidden(FieldKey.SUB_SOURCE, d.sub_source),
        hidden(FieldKey.MEDIUM, d.medium),
        hidden(FieldKey.CAMPAIGN, d.campaign),
        hidden(FieldKey.ARTICLE, d.article),
        hidden(FieldKey.EVENT_NAME, d.event_name),
        hidden(FieldKey.EVENT_DATE, d.event_date),
    ]

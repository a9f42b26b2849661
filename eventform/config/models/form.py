"""Default values and operating modes for one registration form."""

from pydantic import BaseModel, Field


class FormDefaults(BaseModel):
    """Construction-time defaults of the event-registration form."""

    default_country: str = Field(default="COL", description="Country that unlocks department/city")
    phone_code: str = Field(default="57", description="Default phone prefix")
    attendee_type: str = Field(default="Aspirante", description="Default attendee type")
    applicant_type: str = Field(
        default="Aspirante",
        description="Attendee type that unlocks the academic fields",
    )
    non_applicant_program: str = Field(
        default="NOAP",
        description="Program code sent for attendees who are not applicants",
    )
    authorization_accepted: str = Field(default="1", description="Accepted authorization value")
    company: str = Field(default="NA")

    ret_url: str = Field(default="https://cloud.cx.javeriana.edu.co/EVENTOS_TKY")
    debug_email: str = Field(default="")
    authorization_source: str = Field(default="Landing Eventos")
    request_origin: str = Field(default="web_to_lead_eventos")
    lead_source: str = Field(default="Landing Pages")

    source: str = Field(default="Javeriana")
    sub_source: str = Field(default="Organico")
    medium: str = Field(default="Landing")
    campaign: str = Field(default="")
    article: str = Field(default="")
    event_name: str = Field(default="")
    event_date: str = Field(default="")

    dev_mode: bool = Field(default=False, description="Bypass the authorization requirement")
    test_mode: bool = Field(default=False, description="Sandbox submission target")
    debug_mode: bool = Field(default=False)

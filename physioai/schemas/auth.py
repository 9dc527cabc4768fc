from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field


class UserRole(str, Enum):
    PHYSIO = "PHYSIO"
    PATIENT = "PATIENT"
    NONE = "NONE"


class Physio(BaseModel):
    id: str
    name: str


class Identity(BaseModel):
    role: UserRole
    subject: str  # patient id or physio id
    name: str
    selected_patient_id: str | None = None  # clinicians only


class LandingScreen(BaseModel):
    kind: Literal["landing"] = "landing"


class RegistrationScreen(BaseModel):
    kind: Literal["registration"] = "registration"


class PhysioLoginScreen(BaseModel):
    kind: Literal["physio_login"] = "physio_login"


class PatientScreen(BaseModel):
    kind: Literal["patient"] = "patient"
    patient_id: str


class ClinicianScreen(BaseModel):
    kind: Literal["clinician"] = "clinician"
    physio_id: str
    physio_name: str
    selected_patient_id: str | None = None


Screen = Annotated[
    Union[LandingScreen, RegistrationScreen, PhysioLoginScreen, PatientScreen, ClinicianScreen],
    Field(discriminator="kind"),
]


class PhysioLoginRequest(BaseModel):
    license_id: str = Field(..., min_length=1, max_length=50)


class RegistrationRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    # Kept loose: the registration form posts whatever was typed.
    age: int | str | None = None
    email: str = Field(..., min_length=3, max_length=320)
    physio_name: str = Field(..., min_length=1, max_length=200)


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    role: UserRole
    name: str
    screen: Screen


class ScreenResponse(BaseModel):
    role: UserRole
    screen: Screen
    access_token: str | None = None  # reissued when the screen state changes

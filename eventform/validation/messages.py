"""User-facing validation messages."""


class ErrorMessages:
    REQUIRED = "Este campo es obligatorio"
    SELECT = "Selecciona una opción"

    NAME_TOO_SHORT = "El nombre debe tener al menos 2 caracteres"
    NAME_INVALID = "El nombre solo puede contener letras y espacios"

    EMAIL_INVALID = "El formato del correo electrónico no es válido"

    PHONE_TOO_SHORT = "El teléfono debe tener al menos 7 dígitos"
    PHONE_INVALID = "El número de teléfono debe contener solo números"

    DOCUMENT_LENGTH = "El documento debe tener entre 6 y 18 caracteres"
    DOCUMENT_INVALID = "El documento debe contener solo números"

    AUTHORIZATION = (
        "La Pontificia Universidad Javeriana requiere de tu autorización para el "
        "tratamiento de tus datos personales para continuar con el presente proceso, "
        "sin la autorización legalmente no podemos darte continuidad al mismo."
    )

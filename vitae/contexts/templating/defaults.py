"""
Default values for the VITAE template schema.

Provides the shared defaults used by config_resolver.py to build the
immutable PipelineConfig:
- Alias lists for every scalar field (English, Spanish form labels, legacy names)
- Character/line budgets sized for the stock presentation templates
- Repeated block and list slot definitions

Budgets are {max_chars, max_lines}; a missing max_lines means a single-line
clamp with ellipsis, otherwise the text is word-wrapped into max_lines lines.
"""

import copy
from typing import Any, Dict

# Wrapper keys whose mapping value replaces the whole submission
DEFAULT_ENVELOPE_KEYS = ["data", "fields"]

# Scalar schema keys and their aliases, in priority order
DEFAULT_SCALAR_ALIASES = {
    "name": ["name", "Nombre completo", "full_name", "nombre"],
    "title": ["title", "Objetivo / rol buscado", "Puesto", "headline", "role_sought"],
    "about": ["about", "Resumen profesional", "summary", "profile", "resumen"],
    "contact_phone": ["contact_phone", "Telefono", "Teléfono", "phone"],
    "contact_email": ["contact_email", "Email", "email", "correo"],
    "contact_location": ["contact_location", "Ubicacion", "Ubicación", "location"],
    "contact_website": ["contact_website", "Linkedin", "Portfolio", "GITHUB", "website"],
}

# Nested "contact" sub-object: sub-key aliases, flattened to contact_{field}
DEFAULT_CONTACT = {
    "keys": ["contact", "contacto", "contact_info"],
    "fields": {
        "phone": ["phone", "telefono", "teléfono", "mobile"],
        "email": ["email", "mail", "correo"],
        "location": ["location", "ubicacion", "ubicación", "city", "address"],
        "website": ["website", "linkedin", "portfolio", "github", "url"],
    },
}

# Repeated blocks. "flat" patterns take {n} (block index) and {m} (bullet index).
DEFAULT_BLOCKS = {
    "exp": {
        "count": 2,
        "array_keys": ["experience", "experiencia", "work_experience", "experiences"],
        "fields": {
            "company": {
                "flat": ["exp_{n}_company", "exp_{n}_empresa"],
                "nested": ["company", "empresa", "employer", "organization"],
            },
            "role": {
                "flat": ["exp_{n}_role", "exp_{n}_puesto"],
                "nested": ["role", "position", "title", "puesto", "cargo"],
            },
            "dates": {
                "flat": ["exp_{n}_dates", "exp_{n}_fechas"],
                "nested": ["dates", "period", "periodo", "fechas"],
            },
        },
        "bullets": {
            "count": 3,
            "flat": ["exp_{n}_b{m}", "exp_{n}_bullet_{m}"],
            "nested": ["bullets", "highlights", "achievements", "logros", "tareas"],
        },
    },
    "edu": {
        "count": 2,
        "array_keys": ["education", "educacion", "educación", "estudios"],
        "fields": {
            "school": {
                "flat": ["edu_{n}_school", "edu_{n}_institucion"],
                "nested": ["school", "institution", "institucion", "institución", "university"],
            },
            "degree": {
                "flat": ["edu_{n}_degree", "edu_{n}_titulo"],
                "nested": ["degree", "program", "titulo", "título", "carrera"],
            },
            "years": {
                "flat": ["edu_{n}_years", "edu_{n}_fechas"],
                "nested": ["years", "dates", "period", "periodo"],
            },
        },
    },
    "ref": {
        "count": 2,
        "array_keys": ["references", "referencias"],
        "fields": {
            "name": {"flat": ["ref_{n}_name"], "nested": ["name", "nombre"]},
            "role": {"flat": ["ref_{n}_role"], "nested": ["role", "position", "company", "cargo", "empresa"]},
            "contact": {"flat": ["ref_{n}_contact"], "nested": ["contact", "phone", "email", "telefono"]},
        },
    },
}

# Fixed-size lists: explicit list keys win over numbered items, which win over free text
DEFAULT_LISTS = {
    "skill": {
        "count": 7,
        "list_keys": ["skills", "habilidades"],
        "indexed_prefixes": ["skill_", "habilidad_"],
        "free_text_keys": ["skills_raw", "habilidades_raw", "Habilidades"],
    },
    "idioma": {
        "count": 3,
        "list_keys": ["languages", "idiomas"],
        "indexed_prefixes": ["idioma_", "language_"],
        "free_text_keys": ["idiomas_raw", "languages_raw", "Idiomas"],
    },
    "informatica": {
        "count": 4,
        "list_keys": ["it_tools", "informatica"],
        "indexed_prefixes": ["informatica_", "it_"],
        "free_text_keys": ["informatica_raw", "it_raw", "Informática"],
    },
    "curso": {
        "count": 3,
        "list_keys": ["courses", "cursos"],
        "indexed_prefixes": ["curso_", "course_"],
        "free_text_keys": ["cursos_raw", "courses_raw", "Cursos"],
    },
}

DEFAULT_BUDGETS = {
    "name": {"max_chars": 22, "max_lines": 2},
    "title": {"max_chars": 28, "max_lines": 2},
    "about": {"max_chars": 80, "max_lines": 6},
    "contact_phone": {"max_chars": 22},
    "contact_email": {"max_chars": 60},
    "contact_location": {"max_chars": 40, "max_lines": 2},
    "contact_website": {"max_chars": 80},
    "exp_company": {"max_chars": 26, "max_lines": 2},
    "exp_role": {"max_chars": 30, "max_lines": 2},
    "exp_dates": {"max_chars": 30},
    "exp_bullet": {"max_chars": 42, "max_lines": 2},
    "edu_school": {"max_chars": 34, "max_lines": 2},
    "edu_degree": {"max_chars": 34, "max_lines": 2},
    "edu_years": {"max_chars": 40},
    "ref_name": {"max_chars": 30},
    "ref_role": {"max_chars": 34, "max_lines": 2},
    "ref_contact": {"max_chars": 40},
    "skill": {"max_chars": 26},
    "idioma": {"max_chars": 30},
    "informatica": {"max_chars": 30},
    "curso": {"max_chars": 40, "max_lines": 2},
}

DEFAULT_PHOTO = {
    "inline_keys": ["photo_base64", "foto_base64"],
    "url_keys": ["photo_url", "photo", "archivos_main", "foto"],
    "size_px": 220,
}

DEFAULT_FETCH = {
    "max_redirects": 5,
    "timeout_s": 30.0,
}


def get_default_settings() -> Dict[str, Any]:
    """
    Get the complete default settings tree.

    Returns a fresh nested dict each call so callers can merge overrides into
    it without touching the module-level defaults.

    Returns:
        Dict with every setting needed to build a PipelineConfig
    """
    return {
        "clamp_enabled": True,
        "envelope_keys": list(DEFAULT_ENVELOPE_KEYS),
        "scalars": {key: list(aliases) for key, aliases in DEFAULT_SCALAR_ALIASES.items()},
        "contact": {
            "keys": list(DEFAULT_CONTACT["keys"]),
            "fields": {k: list(v) for k, v in DEFAULT_CONTACT["fields"].items()},
        },
        "blocks": copy.deepcopy(DEFAULT_BLOCKS),
        "lists": copy.deepcopy(DEFAULT_LISTS),
        "budgets": copy.deepcopy(DEFAULT_BUDGETS),
        "photo": copy.deepcopy(DEFAULT_PHOTO),
        "fetch": dict(DEFAULT_FETCH),
    }

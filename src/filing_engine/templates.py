"""Static catalog of recurring filing obligations (task templates)."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

from filing_engine.types import Role


class Frequency(str, Enum):
    """How often a filing recurs."""

    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"


class UnknownTemplateError(Exception):
    """Raised when a template key is not in the catalog."""

    def __init__(self, template_key: str):
        self.template_key = template_key
        super().__init__(f"Unknown task template '{template_key}'")


@dataclass(frozen=True)
class TaskTemplate:
    """One catalog entry."""

    key: str
    name_uz: str
    name_ru: str
    assigned_role: Role
    due_day: int
    frequency: Frequency

    def display_name(self, language: str = "uz") -> str:
        return self.name_ru if language == "ru" else self.name_uz


def _monthly(key: str, name_uz: str, name_ru: str, due_day: int) -> TaskTemplate:
    return TaskTemplate(key, name_uz, name_ru, Role.ACCOUNTANT, due_day, Frequency.MONTHLY)


TASK_TEMPLATES: tuple[TaskTemplate, ...] = (
    # Monthly bookkeeping checklist
    _monthly("didox", "Didox", "Didox", 10),
    _monthly("xatlar", "Xatlar", "Письма", 10),
    _monthly("avtokameral", "Avtokameral", "Автокамерал", 15),
    _monthly("my_mehnat", "My Mehnat", "My Mehnat", 15),
    _monthly("one_c", "1C Baza Kiritish", "Ввод базы 1С", 25),
    _monthly("pul_oqimlari", "Pul Oqimlari", "Денежные потоки", 25),
    _monthly("chiqadigan_soliqlar", "Chiqadigan soliqlar", "Исходящие налоги", 25),
    _monthly("hisoblangan_oylik", "Hisoblangan oylik", "Начисленная зарплата", 25),
    _monthly("debitor_kreditor", "Debitor kreditor", "Дебитор кредитор", 25),
    _monthly("foyda_va_zarar", "Foyda va zarar", "Прибыль и убыток", 25),
    _monthly("tovar_ostatka", "Tovar ostatka", "Товарный остаток", 25),
    # Tax returns
    _monthly("aylanma_qqs", "Aylanma / QQS Hisoboti", "Отчет по обороту / НДС", 20),
    _monthly("daromad_soliq", "Daromad Solig'i", "Подоходный налог", 15),
    _monthly("inps", "INPS", "ИНПС", 25),
    _monthly("foyda_soliq", "Foyda Solig'i", "Налог на прибыль", 20),
    _monthly("bonak", "Bo'nak (Avans)", "Аванс", 10),
    _monthly("nds_bekor_qilish", "NDS Bekor Qilish", "Отмена НДС", 20),
    _monthly("statistika", "Statistika Hisoboti", "Статистический отчет", 15),
    TaskTemplate(
        "moliyaviy_natija", "Moliyaviy Natija", "Финансовый результат",
        Role.ACCOUNTANT, 30, Frequency.QUARTERLY,
    ),
    TaskTemplate(
        "buxgalteriya_balansi", "Buxgalteriya Balansi", "Бухгалтерский баланс",
        Role.ACCOUNTANT, 30, Frequency.QUARTERLY,
    ),
    TaskTemplate(
        "itpark_chorak", "IT Park Hisoboti", "Отчет IT Park",
        Role.ACCOUNTANT, 10, Frequency.QUARTERLY,
    ),
    TaskTemplate(
        "yer_soligi", "Yer Solig'i", "Земельный налог",
        Role.ACCOUNTANT, 25, Frequency.YEARLY,
    ),
    TaskTemplate(
        "mol_mulk_soligi", "Mol-mulk Solig'i", "Налог на имущество",
        Role.ACCOUNTANT, 25, Frequency.YEARLY,
    ),
    TaskTemplate(
        "suv_soligi", "Suv Solig'i", "Налог на воду",
        Role.ACCOUNTANT, 25, Frequency.YEARLY,
    ),
    TaskTemplate(
        "bank_klient", "Bank Klient", "Банк клиент",
        Role.BANK_CLIENT, 5, Frequency.MONTHLY,
    ),
)

TEMPLATES_BY_KEY: dict[str, TaskTemplate] = {t.key: t for t in TASK_TEMPLATES}

# External roster column header -> template key.
COLUMN_TO_TEMPLATE: dict[str, str] = {
    "Didox": "didox",
    "Xatlar": "xatlar",
    "Avtokameral": "avtokameral",
    "My Mehnat": "my_mehnat",
    "1c": "one_c",
    "Pul oqimlari": "pul_oqimlari",
    "Chiqadigan soliqlar": "chiqadigan_soliqlar",
    "Hisoblangan oylik": "hisoblangan_oylik",
    "Debitor kreditor": "debitor_kreditor",
    "Foyda va zarar": "foyda_va_zarar",
    "Tovar ostatka": "tovar_ostatka",
    "Aylanma/QQS": "aylanma_qqs",
    "Daromad soliq": "daromad_soliq",
    "INPS": "inps",
    "Foyda soliq": "foyda_soliq",
    "Bo'nak": "bonak",
    "NDSNI BEKOR QILISH": "nds_bekor_qilish",
    "Statistika": "statistika",
    "Moliyaviy natija": "moliyaviy_natija",
    "Buxgalteriya balansi": "buxgalteriya_balansi",
    "IT PARK Rezidenti": "itpark_chorak",
    "Yer solig'i": "yer_soligi",
    "Mol mulk solig'i ma'lumotnoma": "mol_mulk_soligi",
    "Suv solig'i ma'lumotnoma": "suv_soligi",
    "bank klient": "bank_klient",
}

# Identity columns of the roster export.
TAX_ID_COLUMN = "ИНН"
NAME_COLUMN = "НАИМЕНОВАНИЯ"


def get_template(key: str) -> TaskTemplate:
    """Look up a template, raising UnknownTemplateError if absent."""
    try:
        return TEMPLATES_BY_KEY[key]
    except KeyError:
        raise UnknownTemplateError(key) from None


def normalize_header(header: str) -> str:
    """Header comparison form: trimmed, single-spaced, lowercase."""
    return re.sub(r"\s+", " ", header).strip().lower()

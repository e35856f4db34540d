"""Inbound value types consumed by the legal core.

All values are frozen pydantic models: construction validates (raising
``pydantic.ValidationError``) and equality is by value.  Types whose raw
input typically comes from outside (corporate numbers, postal codes, names,
money) additionally expose ``parse(...) -> Result[T, str]`` so aggregate
boundaries can wrap the bare message into a richer ``LegalError``.
"""

from __future__ import annotations

import calendar
import re
from datetime import date, timedelta
from decimal import ROUND_HALF_EVEN, Decimal
from typing import Any

from pydantic import BaseModel, ValidationError, field_validator, model_validator

from kaisha.core.enums import Currency, Prefecture, SealRegistrationStatus, SealType
from kaisha.core.result import Result


def _first_message(exc: ValidationError) -> str:
    """Extract the human message from a pydantic error (drops the 'Value error, ' prefix)."""
    msg = exc.errors()[0]["msg"]
    return msg.removeprefix("Value error, ")


def add_years(d: date, years: int) -> date:
    """Shift *d* by whole years; Feb 29 falls back to Feb 28."""
    try:
        return d.replace(year=d.year + years)
    except ValueError:
        return d.replace(year=d.year + years, day=28)


# ---------------------------------------------------------------------------
# Money
# ---------------------------------------------------------------------------

def _quantum(currency: Currency) -> Decimal:
    return Decimal(1).scaleb(-currency.decimal_places)


class Money(BaseModel):
    """Amount + currency.  JPY carries no fractional part."""

    model_config = {"frozen": True}

    amount: Decimal
    currency: Currency = Currency.JPY

    @model_validator(mode="after")
    def amount_fits_precision(self) -> Money:
        if not self.amount.is_finite():
            raise ValueError(f"Amount must be finite, got {self.amount}")
        if self.amount != self.amount.quantize(_quantum(self.currency)):
            raise ValueError(
                f"Amount {self.amount} exceeds precision for {self.currency.value}"
            )
        return self

    # -- construction ------------------------------------------------------

    @classmethod
    def yen(cls, amount: Decimal | int | str) -> Money:
        """Japanese yen, rounded (half-even) to a whole yen."""
        value = Decimal(amount).quantize(Decimal(1), rounding=ROUND_HALF_EVEN)
        return cls(amount=value, currency=Currency.JPY)

    @classmethod
    def rounded(cls, amount: Decimal, currency: Currency) -> Money:
        value = Decimal(amount).quantize(_quantum(currency), rounding=ROUND_HALF_EVEN)
        return cls(amount=value, currency=currency)

    @classmethod
    def zero(cls, currency: Currency = Currency.JPY) -> Money:
        return cls(amount=Decimal(0), currency=currency)

    @classmethod
    def parse(cls, amount: Any, currency: Currency = Currency.JPY) -> Result[Money, str]:
        try:
            return Result.ok(cls(amount=amount, currency=currency))
        except ValidationError as exc:
            return Result.err(_first_message(exc))

    # -- predicates --------------------------------------------------------

    def is_zero(self) -> bool:
        return self.amount == 0

    def is_positive(self) -> bool:
        return self.amount > 0

    def is_negative(self) -> bool:
        return self.amount < 0

    # -- arithmetic --------------------------------------------------------

    def add(self, other: Money) -> Result[Money, str]:
        if self.currency != other.currency:
            return Result.err(
                f"Cannot add {other.currency.value} to {self.currency.value}"
            )
        return Result.ok(Money(amount=self.amount + other.amount, currency=self.currency))

    def subtract(self, other: Money) -> Result[Money, str]:
        if self.currency != other.currency:
            return Result.err(
                f"Cannot subtract {other.currency.value} from {self.currency.value}"
            )
        return Result.ok(Money(amount=self.amount - other.amount, currency=self.currency))

    def multiply(self, factor: Decimal | int) -> Money:
        return Money.rounded(self.amount * Decimal(factor), self.currency)

    def divide(self, divisor: Decimal | int) -> Result[Money, str]:
        if Decimal(divisor) == 0:
            return Result.err("Cannot divide by zero")
        return Result.ok(Money.rounded(self.amount / Decimal(divisor), self.currency))

    def negate(self) -> Money:
        return Money(amount=-self.amount, currency=self.currency)

    # -- display -----------------------------------------------------------

    def format(self) -> str:
        places = self.currency.decimal_places
        return f"{self.currency.symbol}{self.amount:,.{places}f}"

    def format_with_code(self) -> str:
        places = self.currency.decimal_places
        return f"{self.amount:,.{places}f} {self.currency.value}"

    def __str__(self) -> str:
        return self.format()


# ---------------------------------------------------------------------------
# Corporate number (法人番号)
# ---------------------------------------------------------------------------

def corporate_number_check_digit(base_digits: str) -> int:
    """Modulus-9 check digit over the 12 base digits.

    Weights alternate 1, 2 starting from the rightmost base digit.
    """
    total = sum(
        int(ch) * (1 if (len(base_digits) - 1 - i) % 2 == 0 else 2)
        for i, ch in enumerate(base_digits)
    )
    remainder = total % 9
    return 0 if remainder == 0 else 9 - remainder


def _clean_corporate_number(raw: str) -> str:
    cleaned = raw.replace("-", "").replace(" ", "")
    if not cleaned.strip():
        raise ValueError("Corporate number cannot be empty")
    if len(cleaned) != 13:
        raise ValueError(f"Corporate number must be 13 digits, got {len(cleaned)}")
    if not (cleaned.isascii() and cleaned.isdigit()):
        raise ValueError("Corporate number must contain only digits")
    if int(cleaned[0]) != corporate_number_check_digit(cleaned[1:]):
        raise ValueError("Corporate number checksum is invalid")
    return cleaned


class CorporateNumber(BaseModel):
    """13-digit, checksum-validated corporate number."""

    model_config = {"frozen": True}

    value: str

    @field_validator("value")
    @classmethod
    def checksum_must_be_valid(cls, v: str) -> str:
        return _clean_corporate_number(v)

    @classmethod
    def parse(cls, raw: str) -> Result[CorporateNumber, str]:
        try:
            return Result.ok(cls(value=raw))
        except ValidationError as exc:
            return Result.err(_first_message(exc))

    def format(self) -> str:
        """XXXX-XX-XXXXXXX (all 13 digits kept)."""
        v = self.value
        return f"{v[:4]}-{v[4:6]}-{v[6:]}"

    def __str__(self) -> str:
        return self.value


# ---------------------------------------------------------------------------
# Addresses
# ---------------------------------------------------------------------------

_POSTAL_CODE_RE = re.compile(r"^\d{3}-?\d{4}$")


class PostalCode(BaseModel):
    model_config = {"frozen": True}

    value: str  # 7 digits, no hyphen

    @field_validator("value")
    @classmethod
    def must_be_seven_digits(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Postal code cannot be empty")
        if not _POSTAL_CODE_RE.match(v):
            raise ValueError("Postal code must be 7 digits (format: XXX-XXXX or XXXXXXX)")
        return v.replace("-", "")

    @classmethod
    def parse(cls, raw: str) -> Result[PostalCode, str]:
        try:
            return Result.ok(cls(value=raw))
        except ValidationError as exc:
            return Result.err(_first_message(exc))

    def format(self) -> str:
        return f"{self.value[:3]}-{self.value[3:]}"


class Address(BaseModel):
    """Japanese postal address (〒 + 都道府県 + 市区町村 + 番地)."""

    model_config = {"frozen": True}

    postal_code: PostalCode
    prefecture: Prefecture
    city: str  # 市区町村
    street: str  # 町名・番地
    building: str | None = None  # 建物名・部屋番号

    @field_validator("city", "street")
    @classmethod
    def must_not_be_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("City and street are required")
        return v.strip()

    def with_building(self, building: str) -> Address:
        return self.model_copy(update={"building": building})

    def format(self) -> str:
        building = f" {self.building}" if self.building else ""
        return (
            f"〒{self.postal_code.format()} "
            f"{self.prefecture.japanese}{self.city}{self.street}{building}"
        )

    def format_multiline(self) -> str:
        lines = [
            f"〒{self.postal_code.format()}",
            f"{self.prefecture.japanese}{self.city}",
            self.street,
        ]
        if self.building:
            lines.append(self.building)
        return "\n".join(lines)


# ---------------------------------------------------------------------------
# Names
# ---------------------------------------------------------------------------

class PersonName(BaseModel):
    """Person name in Japanese order with optional furigana."""

    model_config = {"frozen": True}

    family_name: str  # 姓
    given_name: str  # 名
    family_name_kana: str | None = None
    given_name_kana: str | None = None

    @field_validator("family_name")
    @classmethod
    def family_name_required(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Family name is required")
        return v.strip()

    @field_validator("given_name")
    @classmethod
    def given_name_required(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Given name is required")
        return v.strip()

    @classmethod
    def parse(cls, family_name: str, given_name: str) -> Result[PersonName, str]:
        try:
            return Result.ok(cls(family_name=family_name, given_name=given_name))
        except ValidationError as exc:
            return Result.err(_first_message(exc))

    def with_kana(self, family_kana: str, given_kana: str) -> PersonName:
        return self.model_copy(
            update={"family_name_kana": family_kana, "given_name_kana": given_kana}
        )

    @property
    def full_name(self) -> str:
        return f"{self.family_name} {self.given_name}"

    @property
    def full_name_western(self) -> str:
        return f"{self.given_name} {self.family_name}"

    @property
    def full_name_with_kana(self) -> str:
        if self.family_name_kana and self.given_name_kana:
            return (
                f"{self.family_name}（{self.family_name_kana}） "
                f"{self.given_name}（{self.given_name_kana}）"
            )
        return self.full_name


class BilingualName(BaseModel):
    """Company name: Japanese (required), optional reading and English form."""

    model_config = {"frozen": True}

    japanese: str
    japanese_kana: str | None = None
    english: str | None = None

    @field_validator("japanese")
    @classmethod
    def japanese_required(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Japanese name is required")
        return v

    @classmethod
    def parse(cls, japanese: str, english: str | None = None) -> Result[BilingualName, str]:
        try:
            return Result.ok(cls(japanese=japanese, english=english))
        except ValidationError as exc:
            return Result.err(_first_message(exc))

    def with_kana(self, kana: str) -> BilingualName:
        return self.model_copy(update={"japanese_kana": kana})

    def with_english(self, english: str) -> BilingualName:
        return self.model_copy(update={"english": english})

    def display(self) -> str:
        if self.english:
            return f"{self.japanese} ({self.english})"
        return self.japanese


# ---------------------------------------------------------------------------
# Fiscal calendar
# ---------------------------------------------------------------------------

class FiscalYearEnd(BaseModel):
    """Month/day of the fiscal year end (決算期)."""

    model_config = {"frozen": True}

    month: int
    day: int

    @model_validator(mode="after")
    def day_must_exist_in_month(self) -> FiscalYearEnd:
        if not 1 <= self.month <= 12:
            raise ValueError(f"Invalid month: {self.month}")
        # Leap year so that Feb 29 is accepted
        if not 1 <= self.day <= calendar.monthrange(2000, self.month)[1]:
            raise ValueError(f"Invalid day {self.day} for month {self.month}")
        return self

    @classmethod
    def march_31(cls) -> FiscalYearEnd:
        return cls(month=3, day=31)

    @classmethod
    def december_31(cls) -> FiscalYearEnd:
        return cls(month=12, day=31)

    def to_date(self, calendar_year: int) -> date:
        """Actual end date in *calendar_year* (Feb 29 clamps to Feb 28)."""
        max_day = calendar.monthrange(calendar_year, self.month)[1]
        return date(calendar_year, self.month, min(self.day, max_day))

    def format(self) -> str:
        return f"{self.month}月{self.day}日"


class FiscalYear(BaseModel):
    model_config = {"frozen": True}

    start_date: date
    end_date: date
    year_number: int  # FY2024 ends within calendar 2024

    @classmethod
    def create(cls, year_end: FiscalYearEnd, year_number: int) -> FiscalYear:
        end = year_end.to_date(year_number)
        start = add_years(end + timedelta(days=1), -1)
        return cls(start_date=start, end_date=end, year_number=year_number)

    @classmethod
    def japanese_standard(cls, year_number: int) -> FiscalYear:
        """April 1 - March 31."""
        return cls.create(FiscalYearEnd.march_31(), year_number)

    @classmethod
    def for_date(cls, year_end: FiscalYearEnd, on: date) -> FiscalYear:
        if on <= year_end.to_date(on.year):
            return cls.create(year_end, on.year)
        return cls.create(year_end, on.year + 1)

    def contains(self, on: date) -> bool:
        return self.start_date <= on <= self.end_date

    def format(self) -> str:
        return f"FY{self.year_number}"

    def format_range(self) -> str:
        return f"{self.start_date.isoformat()} - {self.end_date.isoformat()}"


class TermPeriod(BaseModel):
    """Term of office: inclusive start/end dates with an optional legal cap."""

    model_config = {"frozen": True}

    start_date: date
    end_date: date
    max_years: int | None = None

    @classmethod
    def create(
        cls, start_date: date, years: int, max_years: int | None = None
    ) -> Result[TermPeriod, str]:
        if years < 1:
            return Result.err(f"Term must be at least 1 year, got {years}")
        if max_years is not None and years > max_years:
            return Result.err(f"Term cannot exceed {max_years} years")
        end = add_years(start_date, years) - timedelta(days=1)
        return Result.ok(cls(start_date=start_date, end_date=end, max_years=max_years))

    @classmethod
    def director_term(cls, start_date: date, years: int) -> Result[TermPeriod, str]:
        """Companies Act: directors serve at most 2 years."""
        return cls.create(start_date, years, 2)

    @classmethod
    def auditor_term(cls, start_date: date, years: int) -> Result[TermPeriod, str]:
        return cls.create(start_date, years, 4)

    def is_active(self, on: date) -> bool:
        return self.start_date <= on <= self.end_date

    def is_expired(self, on: date) -> bool:
        return on > self.end_date

    def days_remaining(self, on: date) -> int:
        if self.is_expired(on):
            return 0
        return (self.end_date - on).days


# ---------------------------------------------------------------------------
# Corporate seal
# ---------------------------------------------------------------------------

class CorporateSeal(BaseModel):
    model_config = {"frozen": True}

    seal_type: SealType
    status: SealRegistrationStatus = SealRegistrationStatus.UNREGISTERED
    registration_date: date | None = None
    legal_affairs_bureau: str | None = None
    retirement_date: date | None = None
    description: str | None = None

    @classmethod
    def registered(
        cls, seal_type: SealType, registration_date: date, bureau: str
    ) -> CorporateSeal:
        return cls(
            seal_type=seal_type,
            status=SealRegistrationStatus.REGISTERED,
            registration_date=registration_date,
            legal_affairs_bureau=bureau,
        )

    @property
    def is_registered(self) -> bool:
        return self.status is SealRegistrationStatus.REGISTERED

    def retire(self, retirement_date: date) -> CorporateSeal:
        return self.model_copy(
            update={
                "status": SealRegistrationStatus.RETIRED,
                "retirement_date": retirement_date,
            }
        )

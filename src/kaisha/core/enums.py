"""Enumerations used across the legal core."""

from __future__ import annotations

from enum import Enum


# ---------------------------------------------------------------------------
# Money
# ---------------------------------------------------------------------------

class Currency(str, Enum):
    JPY = "JPY"  # Primary
    USD = "USD"
    EUR = "EUR"
    GBP = "GBP"
    CNY = "CNY"

    @property
    def decimal_places(self) -> int:
        return 0 if self is Currency.JPY else 2

    @property
    def symbol(self) -> str:
        return _CURRENCY_SYMBOLS[self]


_CURRENCY_SYMBOLS: dict[Currency, str] = {
    Currency.JPY: "¥",
    Currency.USD: "$",
    Currency.EUR: "€",
    Currency.GBP: "£",
    Currency.CNY: "¥",
}


# ---------------------------------------------------------------------------
# Company
# ---------------------------------------------------------------------------

class EntityType(str, Enum):
    """Company forms under the Companies Act."""

    KABUSHIKI_KAISHA = "kabushiki_kaisha"  # 株式会社 (K.K.)
    GODO_KAISHA = "godo_kaisha"  # 合同会社 (G.K.)
    GOMEI_KAISHA = "gomei_kaisha"  # 合名会社
    GOSHI_KAISHA = "goshi_kaisha"  # 合資会社

    @property
    def japanese(self) -> str:
        return _ENTITY_JAPANESE[self]

    @property
    def abbreviation(self) -> str:
        return _ENTITY_ABBREVIATIONS[self]

    @property
    def has_limited_liability(self) -> bool:
        return self in (EntityType.KABUSHIKI_KAISHA, EntityType.GODO_KAISHA)


_ENTITY_JAPANESE: dict[EntityType, str] = {
    EntityType.KABUSHIKI_KAISHA: "株式会社",
    EntityType.GODO_KAISHA: "合同会社",
    EntityType.GOMEI_KAISHA: "合名会社",
    EntityType.GOSHI_KAISHA: "合資会社",
}

_ENTITY_ABBREVIATIONS: dict[EntityType, str] = {
    EntityType.KABUSHIKI_KAISHA: "K.K.",
    EntityType.GODO_KAISHA: "G.K.",
    EntityType.GOMEI_KAISHA: "Gomei",
    EntityType.GOSHI_KAISHA: "Goshi",
}


class CompanyStatus(str, Enum):
    INCORPORATING = "incorporating"  # 設立中
    ACTIVE = "active"  # 活動中
    SUSPENDED = "suspended"  # 休眠中
    UNDER_LIQUIDATION = "under_liquidation"  # 清算中
    DISSOLVED = "dissolved"  # 解散済


class SealType(str, Enum):
    """Corporate seals used in Japan."""

    JITSUIN = "jitsuin"  # 実印 - registered representative seal
    GINKOIN = "ginkoin"  # 銀行印 - bank seal
    KAKUIN = "kakuin"  # 角印 - square acknowledgment seal
    MITOMEIN = "mitomein"  # 認印 - acknowledgment seal, not tracked per company


class SealRegistrationStatus(str, Enum):
    REGISTERED = "registered"  # 登録済 (with Legal Affairs Bureau)
    UNREGISTERED = "unregistered"
    RETIRED = "retired"  # 廃止


# ---------------------------------------------------------------------------
# Directors & board
# ---------------------------------------------------------------------------

class DirectorPosition(str, Enum):
    CHAIRMAN = "chairman"  # 会長
    PRESIDENT = "president"  # 社長
    VICE_PRESIDENT = "vice_president"  # 副社長
    SENIOR_MANAGING_DIRECTOR = "senior_managing_director"  # 専務取締役
    MANAGING_DIRECTOR = "managing_director"  # 常務取締役
    DIRECTOR = "director"  # 取締役
    OUTSIDE_DIRECTOR = "outside_director"  # 社外取締役


class DirectorClassification(str, Enum):
    INSIDE = "inside"  # 社内取締役
    OUTSIDE = "outside"  # 社外取締役
    INDEPENDENT = "independent"  # 独立社外取締役


class DirectorStatus(str, Enum):
    ACTIVE = "active"
    TERM_EXPIRED = "term_expired"
    RESIGNED = "resigned"
    DISMISSED = "dismissed"
    DECEASED = "deceased"


class RegistrationState(str, Enum):
    """Director registration with the Legal Affairs Bureau."""

    PENDING = "pending"
    REGISTERED = "registered"
    DEREGISTERED = "deregistered"


class DirectorRemovalReason(str, Enum):
    TERM_EXPIRED = "term_expired"
    RESIGNATION = "resignation"
    DISMISSAL = "dismissal"
    DEATH = "death"
    DISQUALIFICATION = "disqualification"
    OTHER = "other"


class BoardStructure(str, Enum):
    WITHOUT_BOARD = "without_board"  # 取締役会非設置会社
    WITH_STATUTORY_AUDITORS = "with_statutory_auditors"  # 監査役設置会社
    WITH_AUDIT_COMMITTEE = "with_audit_committee"  # 監査等委員会設置会社
    WITH_THREE_COMMITTEES = "with_three_committees"  # 指名委員会等設置会社


class MeetingType(str, Enum):
    REGULAR = "regular"  # 定例取締役会
    EXTRAORDINARY = "extraordinary"  # 臨時取締役会
    WRITTEN = "written"  # 書面決議


class ResolutionType(str, Enum):
    DIRECTOR_APPOINTMENT = "director_appointment"
    DIRECTOR_REMOVAL = "director_removal"
    REPRESENTATIVE_DESIGNATION = "representative_designation"
    DIVIDEND_DECLARATION = "dividend_declaration"
    CAPITAL_INCREASE = "capital_increase"
    CAPITAL_DECREASE = "capital_decrease"
    SHARE_ISSUANCE = "share_issuance"
    MAJOR_TRANSACTION = "major_transaction"
    AMENDMENT_OF_ARTICLES = "amendment_of_articles"
    OTHER = "other"


class ResolutionStatus(str, Enum):
    PROPOSED = "proposed"
    PASSED = "passed"
    REJECTED = "rejected"
    WITHDRAWN = "withdrawn"


# ---------------------------------------------------------------------------
# Shares
# ---------------------------------------------------------------------------

class ShareClass(str, Enum):
    COMMON = "common"  # 普通株式
    PREFERRED_DIVIDEND = "preferred_dividend"  # 配当優先株式
    PREFERRED_LIQUIDATION = "preferred_liquidation"  # 残余財産分配優先株式
    NON_VOTING = "non_voting"  # 無議決権株式
    RESTRICTED = "restricted"  # 譲渡制限株式
    CONVERTIBLE = "convertible"  # 転換株式
    REDEEMABLE = "redeemable"  # 償還株式


class TransferRestriction(str, Enum):
    NO_RESTRICTION = "no_restriction"
    REQUIRES_BOARD_APPROVAL = "requires_board_approval"
    REQUIRES_SHAREHOLDER_APPROVAL = "requires_shareholder_approval"
    PROHIBITED = "prohibited"


class ShareholderType(str, Enum):
    INDIVIDUAL = "individual"
    DOMESTIC_CORPORATE = "domestic_corporate"
    FOREIGN = "foreign"


class CertificateStatus(str, Enum):
    ISSUED = "issued"
    NOT_ISSUED = "not_issued"
    ELECTRONIC = "electronic"


class ShareholderMeetingType(str, Enum):
    ANNUAL_GENERAL = "annual_general"  # 定時株主総会
    EXTRAORDINARY = "extraordinary"  # 臨時株主総会


class ShareholderResolutionType(str, Enum):
    ORDINARY = "ordinary"  # 普通決議
    SPECIAL = "special"  # 特別決議
    SUPER_SPECIAL = "super_special"  # 特殊決議


# ---------------------------------------------------------------------------
# Addresses
# ---------------------------------------------------------------------------

class Prefecture(str, Enum):
    """All 47 prefectures; value is the 2-digit JIS code."""

    HOKKAIDO = "01"
    AOMORI = "02"
    IWATE = "03"
    MIYAGI = "04"
    AKITA = "05"
    YAMAGATA = "06"
    FUKUSHIMA = "07"
    IBARAKI = "08"
    TOCHIGI = "09"
    GUNMA = "10"
    SAITAMA = "11"
    CHIBA = "12"
    TOKYO = "13"
    KANAGAWA = "14"
    NIIGATA = "15"
    TOYAMA = "16"
    ISHIKAWA = "17"
    FUKUI = "18"
    YAMANASHI = "19"
    NAGANO = "20"
    GIFU = "21"
    SHIZUOKA = "22"
    AICHI = "23"
    MIE = "24"
    SHIGA = "25"
    KYOTO = "26"
    OSAKA = "27"
    HYOGO = "28"
    NARA = "29"
    WAKAYAMA = "30"
    TOTTORI = "31"
    SHIMANE = "32"
    OKAYAMA = "33"
    HIROSHIMA = "34"
    YAMAGUCHI = "35"
    TOKUSHIMA = "36"
    KAGAWA = "37"
    EHIME = "38"
    KOCHI = "39"
    FUKUOKA = "40"
    SAGA = "41"
    NAGASAKI = "42"
    KUMAMOTO = "43"
    OITA = "44"
    MIYAZAKI = "45"
    KAGOSHIMA = "46"
    OKINAWA = "47"

    @property
    def jis_code(self) -> str:
        return self.value

    @property
    def japanese(self) -> str:
        return _PREFECTURE_JAPANESE[int(self.value) - 1]

    @classmethod
    def from_jis_code(cls, code: str) -> Prefecture | None:
        try:
            return cls(code)
        except ValueError:
            return None


# Indexed by JIS code - 1
_PREFECTURE_JAPANESE: tuple[str, ...] = (
    "北海道", "青森県", "岩手県", "宮城県", "秋田県", "山形県", "福島県",
    "茨城県", "栃木県", "群馬県", "埼玉県", "千葉県", "東京都", "神奈川県",
    "新潟県", "富山県", "石川県", "福井県", "山梨県", "長野県", "岐阜県",
    "静岡県", "愛知県", "三重県", "滋賀県", "京都府", "大阪府", "兵庫県",
    "奈良県", "和歌山県", "鳥取県", "島根県", "岡山県", "広島県", "山口県",
    "徳島県", "香川県", "愛媛県", "高知県", "福岡県", "佐賀県", "長崎県",
    "熊本県", "大分県", "宮崎県", "鹿児島県", "沖縄県",
)

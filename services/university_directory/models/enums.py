# services/university_directory/models/enums.py
import enum


class UniversityType(enum.IntEnum):
    Governmental = 1
    Private = 2
    National = 3
    HigherInstitute = 4
    Foreign = 5
    Technological = 6

    @property
    def label(self) -> str:
        return UNIVERSITY_TYPE_LABELS[self]


class Governorate(enum.IntEnum):
    Cairo = 1
    Alexandria = 2
    Giza = 3
    Sharqia = 4
    Dakahlia = 5
    Beheira = 6
    Monufia = 7
    Gharbia = 8
    KafrElSheikh = 9
    Qalyubia = 10
    BeniSuef = 11
    Fayoum = 12
    Minya = 13
    Asyut = 14
    Sohag = 15
    Qena = 16
    Luxor = 17
    Aswan = 18
    RedSea = 19
    NewValley = 20
    Matruh = 21
    NorthSinai = 22
    SouthSinai = 23
    PortSaid = 24
    Ismailia = 25
    Suez = 26
    Damietta = 27

    @property
    def label(self) -> str:
        return GOVERNORATE_LABELS[self]


class StudyType(enum.IntEnum):
    Math = 1
    Science = 2
    Literary = 3
    Industrial = 4
    American = 5

    @property
    def label(self) -> str:
        return STUDY_TYPE_LABELS[self]


class UserRole(str, enum.Enum):
    ADMIN = "Admin"
    STUDENT = "Student"

    @property
    def label(self) -> str:
        return USER_ROLE_LABELS[self]


UNIVERSITY_TYPE_LABELS = {
    UniversityType.Governmental: "جامعات حكومية",
    UniversityType.Private: "جامعات خاصة",
    UniversityType.National: "جامعات أهلية",
    UniversityType.HigherInstitute: "معاهد عالية",
    UniversityType.Foreign: "جامعات أجنبية",
    UniversityType.Technological: "جامعات تكنولوجية",
}

GOVERNORATE_LABELS = {
    Governorate.Cairo: "القاهرة",
    Governorate.Alexandria: "الإسكندرية",
    Governorate.Giza: "الجيزة",
    Governorate.Sharqia: "الشرقية",
    Governorate.Dakahlia: "الدقهلية",
    Governorate.Beheira: "البحيرة",
    Governorate.Monufia: "المنوفية",
    Governorate.Gharbia: "الغربية",
    Governorate.KafrElSheikh: "كفر الشيخ",
    Governorate.Qalyubia: "القليوبية",
    Governorate.BeniSuef: "بني سويف",
    Governorate.Fayoum: "الفيوم",
    Governorate.Minya: "المنيا",
    Governorate.Asyut: "أسيوط",
    Governorate.Sohag: "سوهاج",
    Governorate.Qena: "قنا",
    Governorate.Luxor: "الأقصر",
    Governorate.Aswan: "أسوان",
    Governorate.RedSea: "البحر الأحمر",
    Governorate.NewValley: "الوادي الجديد",
    Governorate.Matruh: "مطروح",
    Governorate.NorthSinai: "شمال سيناء",
    Governorate.SouthSinai: "جنوب سيناء",
    Governorate.PortSaid: "بورسعيد",
    Governorate.Ismailia: "الإسماعيلية",
    Governorate.Suez: "السويس",
    Governorate.Damietta: "دمياط",
}

STUDY_TYPE_LABELS = {
    StudyType.Math: "علم رياضة",
    StudyType.Science: "علم علوم",
    StudyType.Literary: "أدبي",
    StudyType.Industrial: "صنايع",
    StudyType.American: "أمريكان",
}

USER_ROLE_LABELS = {
    UserRole.ADMIN: "مسؤول",
    UserRole.STUDENT: "طالب",
}


def parse_enum(enum_cls, value):
    """Enum member for an int (or numeric string) value, None when undefined"""
    if value is None or value == "":
        return None
    try:
        return enum_cls(int(value))
    except (TypeError, ValueError):
        return None

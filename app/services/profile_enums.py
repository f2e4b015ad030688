from enum import Enum

NOT_MENTIONED = "not_mentioned"


class Community(str, Enum):
    sunni = "sunni"
    mujahid = "mujahid"
    tabligh = "tabligh"
    jamate_islami = "jamate_islami"
    shia = "shia"
    muslim = "muslim"
    not_mentioned = NOT_MENTIONED


class MaritalStatus(str, Enum):
    never_married = "never_married"
    divorced = "divorced"
    nikkah_divorce = "nikkah_divorce"
    widowed = "widowed"
    not_mentioned = NOT_MENTIONED


class Profession(str, Enum):
    student = "student"
    doctor = "doctor"
    engineer = "engineer"
    farmer = "farmer"
    teacher = "teacher"
    not_mentioned = NOT_MENTIONED


class ProfessionType(str, Enum):
    full_time = "full_time"
    part_time = "part_time"
    freelance = "freelance"
    self_employed = "self_employed"
    not_working = "not_working"
    not_mentioned = NOT_MENTIONED


class EducationLevel(str, Enum):
    less_than_high_school = "less_than_high_school"
    high_school = "high_school"
    higher_secondary = "higher_secondary"
    under_graduation = "under_graduation"
    post_graduation = "post_graduation"
    not_mentioned = NOT_MENTIONED


class HomeDistrict(str, Enum):
    thiruvananthapuram = "thiruvananthapuram"
    kollam = "kollam"
    pathanamthitta = "pathanamthitta"
    alappuzha = "alappuzha"
    kottayam = "kottayam"
    ernakulam = "ernakulam"
    thrissur = "thrissur"
    palakkad = "palakkad"
    malappuram = "malappuram"
    kozhikode = "kozhikode"
    wayanad = "wayanad"
    kannur = "kannur"
    kasaragod = "kasaragod"
    idukki = "idukki"
    not_mentioned = NOT_MENTIONED

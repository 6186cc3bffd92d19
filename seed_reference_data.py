"""
Script untuk memasukkan data referensi pendidikan ke database
- Jenjang: D3, D4, S1, S2, S3
- Fakultas: FIK, FEB, FIB, FKes, FT, FK
- Program studi contoh per fakultas

Usage: python seed_reference_data.py
"""
import logging

from app.database import SessionLocal
from app.models import EducationLevel, Faculty, Program
from app.utils.logger import setup_logger

logger = logging.getLogger("app.seed")

LEVELS = ["D3", "D4", "S1", "S2", "S3"]

FACULTIES = ["FIK", "FEB", "FIB", "FKes", "FT", "FK"]

# (nama program, fakultas, jenjang)
PROGRAMS = [
    ("Teknik Informatika", "FIK", "S1"),
    ("Sistem Informasi", "FIK", "S1"),
    ("Desain Komunikasi Visual", "FIK", "S1"),
    ("Teknik Informatika", "FIK", "D3"),
    ("Manajemen", "FEB", "S1"),
    ("Akuntansi", "FEB", "S1"),
    ("Manajemen", "FEB", "S2"),
    ("Sastra Inggris", "FIB", "S1"),
    ("Sastra Jepang", "FIB", "S1"),
    ("Kesehatan Masyarakat", "FKes", "S1"),
    ("Rekam Medis dan Informasi Kesehatan", "FKes", "D3"),
    ("Teknik Elektro", "FT", "S1"),
    ("Teknik Industri", "FT", "S1"),
    ("Kedokteran", "FK", "S1"),
]


def main():
    setup_logger()
    db = SessionLocal()

    try:
        # 1. Jenjang pendidikan
        levels = {}
        for name in LEVELS:
            level = db.query(EducationLevel).filter(EducationLevel.name == name).first()
            if not level:
                level = EducationLevel(name=name)
                db.add(level)
                db.flush()
                logger.info("[+] Jenjang %s dibuat", name)
            levels[name] = level.id

        # 2. Fakultas
        faculties = {}
        for name in FACULTIES:
            faculty = db.query(Faculty).filter(Faculty.name == name).first()
            if not faculty:
                faculty = Faculty(name=name)
                db.add(faculty)
                db.flush()
                logger.info("[+] Fakultas %s dibuat", name)
            faculties[name] = faculty.id

        # 3. Program studi
        program_count = 0
        for name, faculty, level in PROGRAMS:
            existing = db.query(Program).filter(
                Program.name == name,
                Program.faculty_id == faculties[faculty],
                Program.level_id == levels[level]
            ).first()
            if not existing:
                db.add(Program(name=name, faculty_id=faculties[faculty], level_id=levels[level]))
                program_count += 1

        db.commit()
        logger.info("[+] %s program studi baru ditambahkan", program_count)

        # 4. Summary
        logger.info("=" * 50)
        logger.info("  SUMMARY")
        logger.info("=" * 50)
        logger.info("  Jenjang: %s", db.query(EducationLevel).count())
        logger.info("  Fakultas: %s", db.query(Faculty).count())
        logger.info("  Program studi: %s", db.query(Program).count())
        logger.info("=" * 50)

    except Exception:
        db.rollback()
        logger.exception("[ERROR] Seeding gagal")
        raise
    finally:
        db.close()


if __name__ == "__main__":
    main()

"""
Database bootstrap script
Usage:
    python seed_data.py services
    python seed_data.py admin <username> <password>
"""
import logging
import sys

from petspa.database import Base, SessionLocal, engine
from petspa.domain.booking.catalog import seed_services
from petspa.models import AdminUser
from petspa.security_utils import hash_password

logging.basicConfig(level=logging.INFO, format='%(message)s')
logger = logging.getLogger(__name__)


def create_admin(db, username: str, password: str):
    """Create an admin login, or reset the password of an existing one"""
    user = db.query(AdminUser).filter(AdminUser.username == username).first()
    if user:
        user.password_hash = hash_password(password)
        user.active = True
        logger.info(f"Updated password for admin {username}")
    else:
        db.add(AdminUser(username=username, password_hash=hash_password(password)))
        logger.info(f"Created admin {username}")
    db.commit()


if __name__ == "__main__":
    if len(sys.argv) < 2 or sys.argv[1] not in ("services", "admin"):
        logger.error(__doc__)
        sys.exit(1)

    Base.metadata.create_all(bind=engine, checkfirst=True)
    db = SessionLocal()
    try:
        if sys.argv[1] == "services":
            seed_services(db)
        else:
            if len(sys.argv) != 4:
                logger.error("Usage: python seed_data.py admin <username> <password>")
                sys.exit(1)
            create_admin(db, sys.argv[2], sys.argv[3])
        logger.info("✅ Done")
    except Exception as e:
        logger.error(f"❌ Seeding failed: {e}")
        sys.exit(1)
    finally:
        db.close()

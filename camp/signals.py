import logging
from datetime import date

from django.db.models.signals import pre_save
from django.dispatch import receiver
from django.utils import timezone

from camp import stages
from camp.models import Beneficiary

logger = logging.getLogger(__name__)


def age_on(date_of_birth: date, today: date) -> int:
    """Completed years between a birth date and ``today`` (never negative)."""
    age = today.year - date_of_birth.year
    if (today.month, today.day) < (date_of_birth.month, date_of_birth.day):
        age -= 1
    return max(age, 0)


@receiver(pre_save, sender=Beneficiary)
def beneficiary_pre_save(sender, instance, **kwargs):
    """Keep the derived registration fields in line with what was entered."""
    if instance.date_of_birth:
        instance.age = age_on(instance.date_of_birth, timezone.localdate())

    aid = dict(instance.type_of_aid or {})
    if not aid.get("others") and aid.get("others_specify"):
        aid["others_specify"] = ""
    instance.type_of_aid = aid
    instance.type_of_aid_display = stages.format_type_of_aid(aid)

    logger.debug(f"Derived fields refreshed for beneficiary {instance.reg_number or instance.pk}")

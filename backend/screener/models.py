from django.db import models


class FinalResult(models.TextChoices):
    NOT_NHANES = 'Not NHANES', 'Not NHANES'
    PASS = 'Pass', 'Pass'
    FAIL = 'Fail', 'Fail'
    ERROR = 'Error', 'Error'


class DetailMarker(models.TextChoices):
    PASS = '✓', 'Pass'
    FAIL = '✗', 'Fail'
    WARNING = '⚠️', 'Warning'

# products/models/category.py

from django.db import models


class Category(models.Model):
    name = models.CharField(max_length=120, unique=True)

    created_at = models.DateTimeField()
    created_by = models.CharField(max_length=150)
    modified_at = models.DateTimeField()
    modified_by = models.CharField(max_length=150)

    class Meta:
        ordering = ["name"]
        verbose_name_plural = "categories"

    def __str__(self):
        return self.name

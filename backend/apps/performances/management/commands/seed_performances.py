"""Seed the database with example performances for local development."""

from __future__ import annotations

from django.core.management.base import BaseCommand

from apps.performances import models

SEED_PERFORMANCES = [
    {
        "title": "Hamlet",
        "description": "Shakespeare's tragedy of the Prince of Denmark.",
        "poster_url": "https://example.com/posters/hamlet.jpg",
    },
    {
        "title": "Les Misérables",
        "description": "The musical adaptation of Victor Hugo's novel.",
        "poster_url": "https://example.com/posters/les-miserables.jpg",
    },
    {
        "title": "Death of a Salesman",
        "description": "Arthur Miller's portrait of Willy Loman.",
        "poster_url": None,
    },
]


class Command(BaseCommand):
    help = "Seed the database with a handful of performances"

    def handle(self, *args, **options):
        created = 0
        for entry in SEED_PERFORMANCES:
            _, was_created = models.Performance.objects.get_or_create(
                title=entry["title"],
                defaults={
                    "description": entry["description"],
                    "poster_url": entry["poster_url"],
                },
            )
            if was_created:
                created += 1
        self.stdout.write(self.style.SUCCESS(f"Imported {created} performances"))

from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Classroom",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "program",
                    models.CharField(
                        choices=[
                            ("Thai Programme", "Thai Programme"),
                            ("English Programme", "English Programme"),
                            ("Kindergarten", "Kindergarten"),
                        ],
                        max_length=32,
                    ),
                ),
                ("name_th", models.CharField(max_length=120)),
                ("name_en", models.CharField(blank=True, max_length=120)),
            ],
            options={
                "ordering": ["program", "name_th"],
                "indexes": [models.Index(fields=["program"], name="classroom_program_idx")],
            },
        ),
        migrations.CreateModel(
            name="Equipment",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name_th", models.CharField(max_length=120)),
                ("name_en", models.CharField(blank=True, max_length=120)),
            ],
            options={
                "ordering": ["name_th"],
                "verbose_name_plural": "equipment",
            },
        ),
    ]

from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="UserProfile",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("user_id", models.CharField(max_length=64, unique=True, verbose_name="provider user id")),
                ("username", models.CharField(blank=True, default="", max_length=150, verbose_name="username")),
                ("first_name", models.CharField(blank=True, default="", max_length=150, verbose_name="first name")),
                ("last_name", models.CharField(blank=True, default="", max_length=150, verbose_name="last name")),
                ("avatar_url", models.URLField(blank=True, default="", max_length=500, verbose_name="avatar url")),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["user_id"],
            },
        ),
    ]

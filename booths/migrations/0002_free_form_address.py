from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ("booths", "0001_initial"),
    ]

    operations = [
        migrations.AlterField(
            model_name="operatorsession",
            name="address",
            field=models.CharField(blank=True, max_length=45, null=True),
        ),
        migrations.AlterField(
            model_name="codeattempt",
            name="address",
            field=models.CharField(blank=True, max_length=45, null=True),
        ),
    ]

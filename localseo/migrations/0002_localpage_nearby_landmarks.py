# Generated manually

from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ('localseo', '0001_initial'),
    ]

    operations = [
        migrations.AddField(
            model_name='localpage',
            name='nearby_cities',
            field=models.TextField(blank=True, default='', help_text='Comma-separated list of nearby areas.', null=True),
        ),
        migrations.AddField(
            model_name='localpage',
            name='local_landmarks',
            field=models.TextField(blank=True, default='', null=True),
        ),
    ]

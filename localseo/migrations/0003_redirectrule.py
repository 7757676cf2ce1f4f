# Generated manually

from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ('localseo', '0002_localpage_nearby_landmarks'),
    ]

    operations = [
        migrations.CreateModel(
            name='RedirectRule',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('source_path', models.CharField(help_text='Relative path to redirect FROM, e.g. /old-page/', max_length=255, unique=True)),
                ('target_url', models.CharField(help_text='Full URL to redirect TO.', max_length=2048)),
                ('redirect_type', models.PositiveSmallIntegerField(choices=[(301, '301 – Permanent'), (302, '302 – Temporary')], default=301)),
                ('hits', models.PositiveIntegerField(default=0)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
            ],
            options={
                'db_table': 'localseo_redirects',
                'ordering': ['-id'],
            },
        ),
    ]

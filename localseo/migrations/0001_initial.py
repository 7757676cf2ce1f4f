# Generated manually

from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='LocalPage',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('city', models.CharField(max_length=100)),
                ('zip', models.CharField(blank=True, default='', max_length=20)),
                ('service_keyword', models.CharField(max_length=100)),
                ('slug', models.CharField(blank=True, help_text='Legacy /localseo/<slug>/ identifier. Derived from service + city when left empty.', max_length=200, null=True, unique=True)),
                ('ai_intro', models.TextField(blank=True, default='')),
                ('meta_title', models.CharField(blank=True, default='', help_text='Recommended: up to 60 characters.', max_length=255)),
                ('meta_description', models.CharField(blank=True, default='', help_text='Recommended: up to 155 characters.', max_length=500)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'db_table': 'localseo_data',
                'ordering': ['-created_at', '-id'],
                'indexes': [models.Index(fields=['city', 'service_keyword'], name='localseo_city_service')],
            },
        ),
    ]

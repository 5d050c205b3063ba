import django.core.validators
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Buyer',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('first_name', models.CharField(max_length=100)),
                ('last_name', models.CharField(max_length=100)),
                ('email', models.EmailField(db_index=True, max_length=254, unique=True)),
                ('phone', models.CharField(db_index=True, max_length=20, unique=True, validators=[django.core.validators.RegexValidator(message='Phone number must be in E.164 format (e.g., +15551234567)', regex='^\\+[1-9]\\d{7,14}$')])),
                ('password_hash', models.CharField(max_length=255)),
                ('street_address', models.CharField(max_length=255)),
                ('city', models.CharField(max_length=100)),
                ('state', models.CharField(max_length=100)),
                ('province', models.CharField(blank=True, default='', max_length=100)),
                ('zip_code', models.CharField(max_length=20)),
                ('country', models.CharField(max_length=100)),
                ('id_type', models.CharField(blank=True, default='', max_length=50)),
                ('id_number_encrypted', models.TextField(blank=True, default='')),
                ('id_front_url', models.CharField(blank=True, max_length=500, null=True)),
                ('id_back_url', models.CharField(blank=True, max_length=500, null=True)),
                ('selfie_url', models.CharField(blank=True, max_length=500, null=True)),
                ('is_phone_verified', models.BooleanField(default=False)),
                ('is_captcha_verified', models.BooleanField(default=False)),
                ('status', models.CharField(choices=[('incomplete', 'Incomplete'), ('pending', 'Pending'), ('approved', 'Approved'), ('rejected', 'Rejected')], db_index=True, default='incomplete', max_length=20)),
                ('admin_notes', models.TextField(blank=True, default='')),
                ('accepted_terms', models.BooleanField(default=False)),
                ('privacy_accepted', models.BooleanField(default=False)),
                ('marketing_accepted', models.BooleanField(default=False)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'db_table': 'buyers',
                'ordering': ['-created_at', '-id'],
            },
        ),
    ]

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='ProviderProfile',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('vehicle_category', models.CharField(choices=[('Car', 'Car'), ('Bike', 'Bike')], max_length=10)),
                ('vehicle_type', models.CharField(blank=True, max_length=50)),
                ('is_previously_used_vehicle', models.BooleanField(default=False)),
                ('vehicle_number', models.CharField(max_length=20, unique=True)),
                ('rc_number', models.CharField(max_length=30, unique=True)),
                ('insurance_number', models.CharField(max_length=30, unique=True)),
                ('license_number', models.CharField(max_length=30, unique=True)),
                ('aadhar_number', models.CharField(max_length=14, unique=True)),
                ('vehicle_photo', models.TextField(blank=True)),
                ('rc_photo', models.TextField(blank=True)),
                ('insurance_photo', models.TextField(blank=True)),
                ('license_photo', models.TextField(blank=True)),
                ('aadhar_photo', models.TextField(blank=True)),
                ('rc_verified', models.BooleanField(default=False)),
                ('insurance_verified', models.BooleanField(default=False)),
                ('license_verified', models.BooleanField(default=False)),
                ('aadhar_verified', models.BooleanField(default=False)),
                ('ocr_extracted_name', models.CharField(blank=True, max_length=150, null=True)),
                ('ocr_extracted_license_number', models.CharField(blank=True, max_length=50, null=True)),
                ('ocr_extracted_dob', models.CharField(blank=True, max_length=30, null=True)),
                ('ocr_extracted_validity', models.CharField(blank=True, max_length=30, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('user', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name='provider_profile', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'provider_profiles',
            },
        ),
    ]

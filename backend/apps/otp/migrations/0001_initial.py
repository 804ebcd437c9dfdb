from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="PendingVerification",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True, primary_key=True, serialize=False, verbose_name="ID"
                    ),
                ),
                (
                    "phone_number",
                    models.CharField(
                        db_index=True,
                        help_text="Phone number the code was sent to",
                        max_length=20,
                    ),
                ),
                ("code", models.CharField(help_text="The 6-digit OTP code", max_length=6)),
                ("consumed", models.BooleanField(default=False)),
                ("consumed_at", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("expires_at", models.DateTimeField()),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(
                        fields=["phone_number", "consumed"],
                        name="otp_pending_phone_n_4b1f0e_idx",
                    ),
                    models.Index(fields=["expires_at"], name="otp_pending_expires_7c2d9a_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        condition=models.Q(("consumed", False)),
                        fields=("phone_number",),
                        name="otp_one_unconsumed_code_per_phone",
                    ),
                ],
            },
        ),
    ]

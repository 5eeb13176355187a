from django.contrib.auth.models import User
from django.core.management.base import BaseCommand
from django.db import transaction

from catalog.models import (
    Car, CarMod, DriverProfile, LapRecord, Track, TrackEvent, TrackReview, TrackZone, ZoneTip
)

DEMO_EMAIL = 'demo@trackside.com'
DEMO_PASSWORD = 'password123'

DEMO_MODS = [
    ('BC Racing BR Coilovers', 'SUSPENSION'),
    ('Tomei Expreme Ti Exhaust', 'EXHAUST'),
    ('Z1 Motorsports Cold Air Intake', 'ENGINE'),
    ('Stoptech ST-40 Big Brake Kit', 'BRAKES'),
    ('Enkei RPF1 18x9.5', 'WHEELS_TIRES'),
]

DEMO_TRACKS = [
    {
        'name': 'Laguna Seca',
        'location': 'Monterey, CA',
        'state': 'CA',
        'latitude': 36.5754,
        'longitude': -121.7627,
        'description': (
            'Iconic road course featuring the famous Corkscrew turn. 2.238 miles, 11 turns, '
            'and significant elevation changes.'
        ),
        'events': ['ROADCOURSE', 'DRIFT'],
        'zones': [
            ('The Corkscrew (T8-T8A)',
             'Downhill left-right combo with 5.5 stories of elevation change.', 65, 25),
            ('Turn 2 (Andretti Hairpin)', 'Tight left-hand hairpin. Late apex is key.', 30, 40),
            ('Turn 5', 'High-speed left sweeper heading uphill. Carry momentum.', 45, 60),
        ],
    },
    {
        'name': 'Atlanta Motorsports Park',
        'location': 'Dawsonville, GA',
        'state': 'GA',
        'latitude': 34.3705,
        'longitude': -84.1643,
        'description': 'A 2-mile, 16-turn road course with a dedicated drift pad and drag strip.',
        'events': ['ROADCOURSE', 'DRIFT', 'DRAG'],
        'zones': [
            ('Turn 1', 'Fast right-hander after the main straight. Heavy braking zone.', 80, 30),
            ('Turn 12 (Rollercoaster)', 'Blind crest into a left-right combo.', 35, 55),
        ],
    },
]

DEMO_TIPS = [
    'Use the big tree on the left as your turn-in point. Trust the line and commit.',
    'Brake deep and trail brake in. Get on power early for the uphill section.',
    'Stay wide and use all the road.',
]


class Command(BaseCommand):
    help = 'Create the demo driver with a car, two tracks, zones, tips, a review and lap records'

    @transaction.atomic
    def handle(self, *args, **options):
        if User.objects.filter(username=DEMO_EMAIL).exists():
            self.stdout.write("Database already seeded, skipping")
            return

        user = User.objects.create_user(username=DEMO_EMAIL, email=DEMO_EMAIL, password=DEMO_PASSWORD)
        DriverProfile.objects.update_or_create(
            user=user, defaults={'name': 'Demo Driver', 'experience': 'INTERMEDIATE'}
        )

        car = Car.objects.create(owner=user, make='Nissan', model='350Z', year=2006)
        for name, category in DEMO_MODS:
            CarMod.objects.create(car=car, name=name, category=category)
        self.stdout.write(f"Created demo car: {car} with {len(DEMO_MODS)} mods")

        tracks = []
        for data in DEMO_TRACKS:
            track = Track.objects.create(
                name=data['name'],
                location=data['location'],
                state=data['state'],
                latitude=data['latitude'],
                longitude=data['longitude'],
                description=data['description'],
                status='APPROVED',
                uploaded_by=user,
            )
            events = {
                event_type: TrackEvent.objects.create(track=track, event_type=event_type)
                for event_type in data['events']
            }
            zones = [
                TrackZone.objects.create(track=track, name=name, description=desc, pos_x=x, pos_y=y)
                for name, desc, x, y in data['zones']
            ]
            tracks.append((track, events, zones))
            self.stdout.write(f"Created track: {track.name}")

        laguna, laguna_events, laguna_zones = tracks[0]
        for zone, content in zip(laguna_zones, DEMO_TIPS):
            ZoneTip.objects.create(zone=zone, author=user, content=content, conditions='DRY')

        TrackReview.objects.create(
            track=laguna,
            track_event=laguna_events['ROADCOURSE'],
            author=user,
            rating=5,
            content='World-class track. The Corkscrew is every bit as intense as it looks.',
            conditions='DRY',
        )

        atlanta, atlanta_events, _ = tracks[1]
        LapRecord.objects.create(
            track=atlanta, track_event=atlanta_events['ROADCOURSE'], car=car, driver=user,
            lap_time='1:42.856', conditions='DRY',
            notes='Best time of the day. Car felt great after adjusting front camber.',
            tire_pressure_fl=32.5, tire_pressure_fr=32.5, tire_pressure_rl=34.0, tire_pressure_rr=34.0,
            fuel_level=50.0,
            camber_fl=-2.5, camber_fr=-2.5, camber_rl=-1.8, camber_rr=-1.8,
            caster_fl=5.2, caster_fr=5.2,
            toe_fl=0.1, toe_fr=0.1, toe_rl=0.15, toe_rr=0.15,
        )
        LapRecord.objects.create(
            track=atlanta, track_event=atlanta_events['ROADCOURSE'], car=car, driver=user,
            lap_time='1:45.112', conditions='WET',
            notes='Started raining mid-session. Dropped tire pressure for wet grip.',
            tire_pressure_fl=30.0, tire_pressure_fr=30.0, tire_pressure_rl=32.0, tire_pressure_rr=32.0,
            fuel_level=40.0,
            camber_fl=-2.5, camber_fr=-2.5, camber_rl=-1.8, camber_rr=-1.8,
        )

        self.stdout.write(self.style.SUCCESS(f"Seed complete! Login with {DEMO_EMAIL} / {DEMO_PASSWORD}"))

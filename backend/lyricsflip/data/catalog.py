"""Bundled lyric catalogue.

Songs are grouped by genre. Each entry carries a short fragment of the
lyric plus the title and credited artist the player has to pick.
All songs here are traditional or long out of copyright.
"""

CATALOG = {
    'Pop': [
        {'title': 'Take Me Out to the Ball Game', 'artist': 'Jack Norworth',
         'text': 'Buy me some peanuts and Cracker Jack, I don\'t care if I never get back'},
        {'title': 'Daisy Bell', 'artist': 'Harry Dacre',
         'text': 'It won\'t be a stylish marriage, I can\'t afford a carriage'},
        {'title': 'Shine On, Harvest Moon', 'artist': 'Nora Bayes',
         'text': 'I ain\'t had no lovin\' since January, February, June or July'},
        {'title': 'By the Light of the Silvery Moon', 'artist': 'Edward Madden',
         'text': 'I want to spoon, to my honey I\'ll croon love\'s tune'},
        {'title': 'Let Me Call You Sweetheart', 'artist': 'Beth Slater Whitson',
         'text': 'I\'m in love with you, let me hear you whisper that you love me too'},
        {'title': 'In the Good Old Summertime', 'artist': 'Ren Shields',
         'text': 'Strolling through the shady lanes with your baby mine'},
        {'title': 'Meet Me in St. Louis, Louis', 'artist': 'Andrew Sterling',
         'text': 'Meet me at the fair, don\'t tell me the lights are shining any place but there'},
    ],
    'Folk': [
        {'title': 'Oh! Susanna', 'artist': 'Stephen Foster',
         'text': 'I come from Alabama with a banjo on my knee'},
        {'title': 'Camptown Races', 'artist': 'Stephen Foster',
         'text': 'The Camptown ladies sing this song, doo-dah, doo-dah'},
        {'title': 'Home on the Range', 'artist': 'Brewster Higley',
         'text': 'Where seldom is heard a discouraging word and the skies are not cloudy all day'},
        {'title': 'Scarborough Fair', 'artist': 'Traditional',
         'text': 'Parsley, sage, rosemary and thyme, remember me to one who lives there'},
        {'title': 'My Bonnie Lies over the Ocean', 'artist': 'Traditional',
         'text': 'Bring back, bring back, oh bring back my Bonnie to me'},
        {'title': 'Shenandoah', 'artist': 'Traditional',
         'text': 'Away, you rolling river, away, I\'m bound away across the wide Missouri'},
    ],
    'Gospel': [
        {'title': 'Amazing Grace', 'artist': 'John Newton',
         'text': 'I once was lost but now am found, was blind but now I see'},
        {'title': 'Swing Low, Sweet Chariot', 'artist': 'Wallace Willis',
         'text': 'Coming for to carry me home'},
        {'title': 'When the Saints Go Marching In', 'artist': 'Traditional',
         'text': 'Oh Lord, I want to be in that number'},
        {'title': 'Down by the Riverside', 'artist': 'Traditional',
         'text': 'Gonna lay down my burden, I ain\'t gonna study war no more'},
        {'title': 'This Little Light of Mine', 'artist': 'Traditional',
         'text': 'I\'m gonna let it shine, let it shine, let it shine'},
    ],
    'Ballad': [
        {'title': 'Auld Lang Syne', 'artist': 'Robert Burns',
         'text': 'Should old acquaintance be forgot and never brought to mind'},
        {'title': 'Danny Boy', 'artist': 'Frederic Weatherly',
         'text': 'The pipes, the pipes are calling from glen to glen'},
        {'title': 'Greensleeves', 'artist': 'Traditional',
         'text': 'Alas, my love, you do me wrong to cast me off discourteously'},
        {'title': 'Beautiful Dreamer', 'artist': 'Stephen Foster',
         'text': 'Wake unto me, starlight and dewdrops are waiting for thee'},
    ],
}

"""Cards, rules, players, rooms, games and the game manager."""